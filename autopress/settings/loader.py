"""Helpers for loading configuration and static settings."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_NAME = "config.toml"
CONFIG_ENV_VAR = "AUTOPRESS_CONFIG"

DEFAULT_TEXT_MODEL = "gemini-2.0-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.0-flash-preview-image-generation"


@dataclass(slots=True)
class GenerationSettings:
    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    language: str = "English"
    min_words: int = 800
    thinking_budget: int | None = None


@dataclass(slots=True)
class PublishSettings:
    timeout: float = 60.0
    default_delay: float = 10.0


@dataclass(slots=True)
class PathSettings:
    data_dir: Path
    state_dir: Path
    images_dir: Path
    reports_dir: Path
    registry: Path


@dataclass(slots=True)
class AppConfig:
    generation: GenerationSettings
    publish: PublishSettings
    paths: PathSettings
    log_level: str = "INFO"


def _to_path(value: str | None, *, fallback: Path) -> Path:
    if not value:
        return fallback
    candidate = Path(value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _config_path(explicit: str | os.PathLike[str] | None = None) -> tuple[Path, bool]:
    """Return the config path and whether the caller asked for it explicitly."""
    if explicit:
        candidate, required = Path(explicit), True
    else:
        env_value = os.environ.get(CONFIG_ENV_VAR)
        if env_value:
            candidate, required = Path(env_value), True
        else:
            candidate, required = PROJECT_ROOT / DEFAULT_CONFIG_NAME, False
    if not candidate.is_absolute():
        candidate = PROJECT_ROOT / candidate
    return candidate, required


def _load_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return {}
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _ensure_directories(paths: Iterable[Path]) -> None:
    for directory in paths:
        directory.mkdir(parents=True, exist_ok=True)


def _optional_int(raw: Any) -> int | None:
    if isinstance(raw, (int, float)):
        return int(raw)
    if isinstance(raw, str) and raw.strip():
        return int(float(raw))
    return None


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    path, required = _config_path(config_path)
    data = _load_toml(path, required=required)

    generation_section = data.get("generation", {})
    publish_section = data.get("publish", {})
    paths_section = data.get("paths", {})
    logging_section = data.get("logging", {})

    data_dir = _to_path(paths_section.get("data_dir"), fallback=PROJECT_ROOT / "data")
    state_dir = _to_path(paths_section.get("state_dir"), fallback=data_dir / "state")
    images_dir = _to_path(paths_section.get("images_dir"), fallback=data_dir / "images")
    reports_dir = _to_path(paths_section.get("reports_dir"), fallback=data_dir / "reports")
    registry = _to_path(paths_section.get("registry"), fallback=state_dir / "registry.json")

    _ensure_directories((data_dir, state_dir, images_dir, reports_dir, registry.parent))

    generation = GenerationSettings(
        text_model=str(generation_section.get("text_model", DEFAULT_TEXT_MODEL)),
        image_model=str(generation_section.get("image_model", DEFAULT_IMAGE_MODEL)),
        language=str(generation_section.get("language", "English")),
        min_words=int(generation_section.get("min_words", 800)),
        thinking_budget=_optional_int(generation_section.get("thinking_budget")),
    )
    publish = PublishSettings(
        timeout=float(publish_section.get("timeout", 60)),
        default_delay=float(publish_section.get("default_delay", 10)),
    )

    return AppConfig(
        generation=generation,
        publish=publish,
        paths=PathSettings(
            data_dir=data_dir,
            state_dir=state_dir,
            images_dir=images_dir,
            reports_dir=reports_dir,
            registry=registry,
        ),
        log_level=str(logging_section.get("level", "INFO")).upper(),
    )
