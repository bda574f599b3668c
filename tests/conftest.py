from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from scriptcov.core.coverage import CoverageMap
from scriptcov.middleware.instrument import InstrumenterSettings
from scriptcov.middleware.namespace import ENGINE_COVERAGE_INIT
from scriptcov.middleware.transform import TransformOptions



@dataclass
class FakeEngine:
    """Stand-in instrumenter that prefixes the engine's counter initialiser."""

    settings: InstrumenterSettings
    calls: list[tuple[str, str, dict[str, Any] | None]] = field(default_factory=list)

    def instrument(self, code: str, filename: str, input_source_map: dict[str, Any] | None = None) -> str:
        self.calls.append((code, filename, input_source_map))
        return f"var cov = function () {{ {ENGINE_COVERAGE_INIT} }}();\n{code}"


@dataclass
class FakeTransformer:
    calls: list[TransformOptions] = field(default_factory=list)

    def __call__(self, code: str, options: TransformOptions) -> str:
        self.calls.append(options)
        return f"/* compile={options.compile} amd={options.transform_modules_to_amd} */\n{code}"


@dataclass
class RecordingEmitter:
    events: list[tuple[str, str, str, str]] = field(default_factory=list)

    def emit(self, level: str, component: str, action: str, detail: str) -> None:
        self.events.append((level, component, action, detail))


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def engines() -> list[FakeEngine]:
    return []


@pytest.fixture
def engine_factory(engines: list[FakeEngine]) -> Callable[[InstrumenterSettings], FakeEngine]:
    def build(settings: InstrumenterSettings) -> FakeEngine:
        engine = FakeEngine(settings)
        engines.append(engine)
        return engine

    return build


@pytest.fixture
def transformer() -> FakeTransformer:
    return FakeTransformer()


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


def file_coverage(
    path: str,
    *,
    statements: Sequence[int] = (),
    functions: Sequence[int] = (),
    branches: Sequence[Sequence[int]] = (),
) -> dict[str, Any]:
    """Build an Istanbul file record; statement ``i`` sits alone on line ``i + 1``."""

    def loc(line: int) -> dict[str, Any]:
        return {"start": {"line": line, "column": 0}, "end": {"line": line, "column": 10}}

    return {
        "path": path,
        "statementMap": {str(i): loc(i + 1) for i in range(len(statements))},
        "fnMap": {str(i): {"name": f"fn{i}", "loc": loc(i + 1)} for i in range(len(functions))},
        "branchMap": {
            str(i): {"type": "if", "loc": loc(i + 1), "locations": [loc(i + 1)] * len(arms)}
            for i, arms in enumerate(branches)
        },
        "s": {str(i): hits for i, hits in enumerate(statements)},
        "f": {str(i): hits for i, hits in enumerate(functions)},
        "b": {str(i): list(arms) for i, arms in enumerate(branches)},
    }


@pytest.fixture
def full_coverage() -> CoverageMap:
    return CoverageMap(
        {
            "my-app.js": file_coverage("my-app.js", statements=[3, 1], functions=[1], branches=[[1, 2]]),
            "my-view1.js": file_coverage("my-view1.js", statements=[1, 1, 1], functions=[2, 1]),
        }
    )


@pytest.fixture
def average_coverage() -> CoverageMap:
    """Globally and for my-view2.js: lines 66.67%, statements 66.67%, functions 50%."""
    return CoverageMap(
        {
            "my-view1.js": file_coverage("my-view1.js"),
            "my-view2.js": file_coverage("my-view2.js", statements=[1, 4, 0], functions=[1, 0]),
        }
    )


@pytest.fixture
def even_coverage() -> CoverageMap:
    """Every metric sits at exactly two thirds."""
    return CoverageMap(
        {
            "even.js": file_coverage(
                "even.js", statements=[1, 1, 0], functions=[1, 1, 0], branches=[[1, 1, 0]]
            ),
        }
    )


@pytest.fixture
def coverage_json_file(tmp_path: Path) -> Callable[..., Path]:
    def write(files: dict[str, dict[str, Any]], *, filename: str = "coverage-final.json") -> Path:
        path = tmp_path / filename
        path.write_text(json.dumps(files), encoding="utf-8")
        return path

    return write


@pytest.fixture
def make_file_coverage() -> Callable[..., dict[str, Any]]:
    return file_coverage
