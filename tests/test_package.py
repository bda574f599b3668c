from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from scriptcov.config import CoverageOptions
from scriptcov.middleware.package import get_package_name, read_json

if TYPE_CHECKING:
    from pathlib import Path


def test_explicit_name_wins(tmp_path: Path) -> None:
    (tmp_path / "bower.json").write_text(json.dumps({"name": "from-bower"}))
    assert get_package_name(CoverageOptions(root=tmp_path, package_name="explicit")) == "explicit"


def test_name_from_bower_or_npm_manifest(tmp_path: Path) -> None:
    (tmp_path / "bower.json").write_text(json.dumps({"name": "from-bower"}))
    (tmp_path / "package.json").write_text(json.dumps({"name": "@scope/from-npm"}))
    assert get_package_name(CoverageOptions(root=tmp_path)) == "from-bower"
    assert get_package_name(CoverageOptions(root=tmp_path, npm=True)) == "@scope/from-npm"


def test_falls_back_to_directory_name(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    root = tmp_path / "my-element"
    root.mkdir()
    with caplog.at_level(logging.WARNING, logger="scriptcov"):
        assert get_package_name(CoverageOptions(root=root, npm=True)) == "my-element"
    assert "no package.json found, defaulting to packageName=my-element" in caplog.messages


def test_malformed_manifest_is_not_fatal(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    (tmp_path / "bower.json").write_text("{nope")
    with caplog.at_level(logging.ERROR, logger="scriptcov"):
        assert read_json("bower.json", tmp_path) is None
    assert any("Could not parse" in m for m in caplog.messages)
    assert get_package_name(CoverageOptions(root=tmp_path)) == tmp_path.name


def test_read_json_missing_file(tmp_path: Path) -> None:
    assert read_json("package.json", tmp_path) is None
