"""Schema validation for minigame engine parameters.

Each ``minigames/<name>/config_schema.py`` module declares:

- ``REQUIRED_PARAMS``: name -> type, must be present after defaults apply
- ``DEFAULTS``: name -> value merged under the user's params
- ``OPTIONAL_PARAMS``: name -> type, checked when present
- ``PARAM_BOUNDS`` (optional): name -> (low, high), inclusive; ``None`` is open
"""

from __future__ import annotations

import warnings
from typing import Any, Mapping


class SchemaValidationError(ValueError):
    """Raised when engine params fail schema validation."""


def _coerce(key: str, value: Any, expected_type: type[Any]) -> Any:
    # YAML writes 3.0 as 3; whole numbers are accepted where floats are expected.
    if expected_type is float and type(value) is int:
        return float(value)
    if type(value) is not expected_type:
        raise SchemaValidationError(
            f"Parameter '{key}' expected {expected_type.__name__}, got {type(value).__name__}."
        )
    return value


def _check_bounds(engine_name: str, merged: Mapping[str, Any], bounds: Mapping[str, tuple[Any, Any]]) -> None:
    for key, (low, high) in bounds.items():
        if key not in merged:
            continue
        value = merged[key]
        if (low is not None and value < low) or (high is not None and value > high):
            raise SchemaValidationError(
                f"Parameter '{key}' for engine '{engine_name}' must be within [{low}, {high}], got {value}."
            )


def validate_engine_params(
    params: Mapping[str, Any],
    schema_module: Any,
    engine_name: str,
    strict: bool = True,
) -> dict[str, Any]:
    """Validate engine params against the engine's schema module.

    Applies defaults, validates types and bounds, and handles unknown
    parameters as warnings or errors depending on ``strict``. Returns the
    merged parameter mapping ready for the engine constructor.
    """
    required: Mapping[str, type[Any]] = getattr(schema_module, "REQUIRED_PARAMS", {})
    defaults: Mapping[str, Any] = getattr(schema_module, "DEFAULTS", {})
    optional: Mapping[str, type[Any]] = getattr(schema_module, "OPTIONAL_PARAMS", {})
    bounds: Mapping[str, tuple[Any, Any]] = getattr(schema_module, "PARAM_BOUNDS", {})

    if not all(isinstance(table, Mapping) for table in (required, defaults, optional, bounds)):
        raise SchemaValidationError(
            f"Engine '{engine_name}' schema tables must be mappings."
        )

    merged = dict(defaults)
    merged.update(params)

    for key, expected_type in required.items():
        if key not in merged:
            raise SchemaValidationError(
                f"Engine '{engine_name}' missing required parameter '{key}'."
            )
        merged[key] = _coerce(key, merged[key], expected_type)

    for key, expected_type in optional.items():
        if key in merged:
            merged[key] = _coerce(key, merged[key], expected_type)

    allowed = set(required) | set(optional) | set(defaults)
    extras = [key for key in merged if key not in allowed]
    if extras:
        message = f"Unknown parameter(s) {extras} for engine '{engine_name}'."
        if strict:
            raise SchemaValidationError(message)
        warnings.warn(message, stacklevel=2)

    _check_bounds(engine_name, merged, bounds)
    return merged
