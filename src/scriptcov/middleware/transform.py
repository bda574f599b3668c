"""Adapting instrumented scripts to what the requesting browser can run."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from scriptcov import logger
from scriptcov.core.types import CompileMode, ModuleResolution
from scriptcov.middleware.capabilities import browser_capabilities, get_compile_target

if TYPE_CHECKING:
    from collections.abc import Callable

    from scriptcov.core.types import CapabilityProfile
    from scriptcov.middleware.app import RequestDescriptor


@dataclass(frozen=True, slots=True)
class TransformOptions:
    """Everything the external script transformer needs for one request."""

    compile: str | None
    transform_modules_to_amd: bool
    module_resolution: ModuleResolution
    file_path: Path
    is_component_request: bool
    package_name: str
    component_dir: Path
    root_dir: Path


class ScriptTransformer(Protocol):
    def __call__(self, code: str, options: TransformOptions) -> str:
        """Downgrade syntax and rewrap modules; must be deterministic for fixed inputs."""
        ...


def component_dir(root: Path, *, npm: bool) -> Path:
    return root / ("node_modules" if npm else "bower_components")


class CompatibilityTransform:
    """Derive :class:`TransformOptions` from a request and apply the transformer."""

    def __init__(
        self,
        transformer: ScriptTransformer,
        *,
        package_name: str,
        root: Path,
        client_root: str,
        npm: bool = False,
        module_resolution: ModuleResolution | None = None,
        is_component_request_override: bool | None = None,
        compile_mode: CompileMode = CompileMode.AUTO,
        capabilities: Callable[[str | None], CapabilityProfile] = browser_capabilities,
    ) -> None:
        self.transformer = transformer
        self.package_name = package_name
        self.root = root
        self.client_root = client_root
        self.npm = npm
        self.module_resolution = module_resolution or (
            ModuleResolution.NODE if npm else ModuleResolution.NONE
        )
        self.is_component_request_override = is_component_request_override
        self.compile_mode = compile_mode
        self.capabilities = capabilities

    def is_component_request(self, request: RequestDescriptor) -> bool:
        if self.is_component_request_override is not None:
            return self.is_component_request_override
        return request.base_url == self.client_root

    def options_for(self, request: RequestDescriptor, file_path: Path) -> TransformOptions:
        caps = self.capabilities(request.user_agent)
        return TransformOptions(
            compile=get_compile_target(caps, self.compile_mode),
            transform_modules_to_amd="modules" not in caps,
            module_resolution=self.module_resolution,
            file_path=file_path,
            is_component_request=self.is_component_request(request),
            package_name=self.package_name,
            component_dir=component_dir(self.root, npm=self.npm),
            root_dir=self.root,
        )

    def __call__(self, request: RequestDescriptor, code: str, file_path: Path) -> str:
        options = self.options_for(request, file_path)
        logger.debug(
            "transform %s compile=%s amd=%s", file_path, options.compile, options.transform_modules_to_amd
        )
        return self.transformer(code, options)


__all__ = ["CompatibilityTransform", "ScriptTransformer", "TransformOptions", "component_dir"]
