from __future__ import annotations

import os
import shutil
from pathlib import Path

import pytest

from livecode.app import AppError, build_registry, run_code
from livecode.config import AppConfig, DriverConfig


def test_build_registry_includes_custom_drivers(tmp_path: Path) -> None:
    config = AppConfig(
        workdir=tmp_path,
        drivers={
            "upper": DriverConfig(command="tr", args=["a-z", "A-Z"]),
            "postgres": DriverConfig(command="pgcli"),
        },
    )

    registry = build_registry(config)

    assert registry.list() == ["mysql", "postgres", "shell", "sqlite", "upper"]


@pytest.mark.skipif(shutil.which("tr") is None, reason="tr not available")
def test_run_code_uses_configured_custom_driver(tmp_path: Path) -> None:
    config_path = tmp_path / "livecode.yaml"
    config_path.write_text(
        'drivers:\n  upper:\n    command: tr\n    args: ["a-z", "A-Z"]\n', encoding="utf-8"
    )

    result = run_code(driver="upper", code="hello", config_path=config_path)

    assert result.success is True
    assert result.output == "HELLO"


@pytest.mark.skipif(os.name != "posix", reason="requires a POSIX shell")
def test_run_code_runs_in_configured_workdir(tmp_path: Path) -> None:
    (tmp_path / "livecode.yaml").write_text("workdir: .\n", encoding="utf-8")

    result = run_code(driver="shell", code="pwd", config_path=tmp_path)

    assert Path(result.output).resolve() == tmp_path.resolve()


def test_run_code_unknown_driver(tmp_path: Path) -> None:
    result = run_code(driver="cobol", code="DISPLAY 'HI'.", config_path=tmp_path)

    assert result.success is False
    assert result.error == "driver not found: cobol"


def test_run_code_wraps_config_errors(tmp_path: Path) -> None:
    broken = tmp_path / "slides.md"
    broken.write_text("---\ndrivers: {}\n", encoding="utf-8")

    with pytest.raises(AppError):
        run_code(driver="shell", code="echo hi", config_path=broken)
