"""Panel config loading and validation for the minigame dispatcher."""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any, Mapping

import yaml

from core.schema_validator import SchemaValidationError, validate_engine_params
from core.settings import MinigameSettings
from minigames.base_engine import MinigameKind


class ConfigValidationError(ValueError):
    """Raised when panel config fails validation."""


_ENGINE_SECTIONS = {kind.value: kind for kind in MinigameKind}
_ALLOWED_TOP_LEVEL = {"seed", "enabled"} | set(_ENGINE_SECTIONS)


def _load_payload_or_raise(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigValidationError(f"Config file not found: {path}")

    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            payload = json.loads(text)
        elif suffix in {".yaml", ".yml"}:
            payload = yaml.safe_load(text)
        else:
            raise ConfigValidationError(f"Unsupported config extension: {suffix}")
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigValidationError(f"Failed to parse config '{path}': {exc}") from exc

    if not isinstance(payload, Mapping):
        raise ConfigValidationError("Top-level config must be a mapping.")
    return dict(payload)


def _validate_enabled(section: Any) -> MinigameSettings:
    if section is None:
        return MinigameSettings()
    if not isinstance(section, Mapping):
        raise ConfigValidationError("Section 'enabled' must be a mapping.")

    unknown = [key for key in section if key not in _ENGINE_SECTIONS]
    if unknown:
        raise ConfigValidationError(f"Section 'enabled' has unknown minigame(s): {unknown}.")

    flags: dict[str, bool] = {}
    for key, value in section.items():
        if type(value) is not bool:
            raise ConfigValidationError(
                f"Field 'enabled.{key}' expected bool, got {type(value).__name__}."
            )
        flags[f"enable_{key}"] = value
    return MinigameSettings(**flags)


def validate_config(config: Mapping[str, Any], strict: bool = True) -> dict[str, Any]:
    """Validate an already-parsed panel config mapping.

    Returns normalized config with keys:
    - seed
    - settings
    - engine_params (keyed by ``MinigameKind``)
    """
    if "seed" not in config:
        raise ConfigValidationError("Missing required field 'seed'.")
    if type(config["seed"]) is not int:
        raise ConfigValidationError(
            f"Field 'seed' expected int, got {type(config['seed']).__name__}."
        )

    extras_top = [key for key in config if key not in _ALLOWED_TOP_LEVEL]
    if extras_top:
        raise ConfigValidationError(f"Unknown top-level field(s): {extras_top}.")

    settings = _validate_enabled(config.get("enabled"))

    engine_params: dict[MinigameKind, dict[str, Any]] = {}
    for name, kind in _ENGINE_SECTIONS.items():
        raw_params = config.get(name)
        if raw_params is None:
            raw_params = {}
        if not isinstance(raw_params, Mapping):
            raise ConfigValidationError(f"Section '{name}' must be a mapping.")

        schema_module_name = f"minigames.{name}.config_schema"
        try:
            schema_module = importlib.import_module(schema_module_name)
        except ImportError as exc:
            raise ConfigValidationError(
                f"Could not load schema for minigame '{name}' ({schema_module_name})."
            ) from exc

        try:
            engine_params[kind] = validate_engine_params(
                params=raw_params,
                schema_module=schema_module,
                engine_name=name,
                strict=strict,
            )
        except SchemaValidationError as exc:
            raise ConfigValidationError(str(exc)) from exc

    return {
        "seed": int(config["seed"]),
        "settings": settings,
        "engine_params": engine_params,
    }


def load_config(path: str | Path, strict: bool = True) -> dict[str, Any]:
    """Load and validate a YAML or JSON panel config file."""
    return validate_config(_load_payload_or_raise(Path(path)), strict=strict)
