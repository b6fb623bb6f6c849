from pathlib import Path

import pytest
from pydantic import ValidationError

from repcon.config import DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_FILES, CondenseSettings


def test_defaults(tmp_path: Path) -> None:
    settings = CondenseSettings(path_to_repo=tmp_path)

    assert settings.output_directory == Path("output")
    assert settings.output_name == "repcon"
    assert settings.max_files == DEFAULT_MAX_FILES
    assert settings.max_file_size == DEFAULT_MAX_FILE_SIZE
    assert settings.total_allowed_size == DEFAULT_MAX_FILES * DEFAULT_MAX_FILE_SIZE
    assert settings.resolved_ignore_file == tmp_path / ".repconignore"
    assert settings.upload is False
    assert settings.include_hidden is False


@pytest.mark.parametrize(
    "overrides",
    (
        {"max_file_size": 0},
        {"max_files": -1},
        {"output_name": ""},
        {"output_name": "nested/name"},
    ),
)
def test_invalid_values_are_rejected(tmp_path: Path, overrides: dict) -> None:
    with pytest.raises(ValidationError):
        CondenseSettings(path_to_repo=tmp_path, **overrides)


def test_blank_ignore_patterns_are_dropped(tmp_path: Path) -> None:
    settings = CondenseSettings(path_to_repo=tmp_path, ignore_patterns=[" *.log ", "", "  "])
    assert settings.ignore_patterns == ["*.log"]


def test_from_env_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("REPCON_OUTPUT_DIR", str(tmp_path / "env-out"))
    monkeypatch.setenv("REPCON_OUTPUT_NAME", "bundle")
    monkeypatch.setenv("REPCON_MAX_FILES", "3")
    monkeypatch.setenv("REPCON_MAX_FILE_SIZE", "4096")
    monkeypatch.setenv("REPCON_IGNORE", "*.lock,dist/")

    settings = CondenseSettings.from_env(path_to_repo=tmp_path)

    assert settings.output_directory == tmp_path / "env-out"
    assert settings.output_name == "bundle"
    assert settings.max_files == 3
    assert settings.max_file_size == 4096
    assert settings.ignore_patterns == ["*.lock", "dist/"]


def test_from_env_overrides_win_and_none_is_ignored(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("REPCON_OUTPUT_NAME", "bundle")
    monkeypatch.setenv("REPCON_MAX_FILE_SIZE", "4096")

    settings = CondenseSettings.from_env(path_to_repo=tmp_path, output_name="explicit", max_file_size=None)

    assert settings.output_name == "explicit"
    assert settings.max_file_size == 4096
