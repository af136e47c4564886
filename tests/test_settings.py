from __future__ import annotations

from pathlib import Path

import pytest

from autopress.settings import load_config
from autopress.settings.loader import CONFIG_ENV_VAR, DEFAULT_TEXT_MODEL


def test_load_config_reads_sections(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f"""
[generation]
text_model = "gemini-test"
language = "Thai"
min_words = 1000
thinking_budget = 512

[publish]
timeout = 15
default_delay = 3

[paths]
data_dir = "{data_dir.as_posix()}"

[logging]
level = "debug"
""",
        encoding="utf-8",
    )
    config = load_config(config_path)
    assert config.generation.text_model == "gemini-test"
    assert config.generation.language == "Thai"
    assert config.generation.min_words == 1000
    assert config.generation.thinking_budget == 512
    assert config.publish.timeout == 15.0
    assert config.publish.default_delay == 3.0
    assert config.paths.registry == data_dir / "state" / "registry.json"
    assert config.paths.images_dir.is_dir()
    assert config.paths.reports_dir.is_dir()
    assert config.log_level == "DEBUG"


def test_explicit_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.toml")


def test_env_var_selects_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "env.toml"
    config_path.write_text(
        f'[paths]\ndata_dir = "{(tmp_path / "d").as_posix()}"\n', encoding="utf-8"
    )
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    config = load_config()
    assert config.generation.text_model == DEFAULT_TEXT_MODEL
    assert config.paths.data_dir == tmp_path / "d"
