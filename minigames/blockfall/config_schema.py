"""Config schema for the block-fall minigame."""

REQUIRED_PARAMS: dict[str, type] = {}

DEFAULTS = {
    "columns": 10,
    "rows": 20,
    "gravity_start_ms": 800,
    "gravity_floor_ms": 80,
    "gravity_decay": 0.9,
    "max_speed_level": 15,
}

OPTIONAL_PARAMS = {
    "columns": int,
    "rows": int,
    "gravity_start_ms": int,
    "gravity_floor_ms": int,
    "gravity_decay": float,
    "max_speed_level": int,
}

# The widest piece spawns four cells wide.
PARAM_BOUNDS = {
    "columns": (4, 64),
    "rows": (4, 128),
    "gravity_start_ms": (1, None),
    "gravity_floor_ms": (1, None),
    "gravity_decay": (0.0, 1.0),
    "max_speed_level": (1, None),
}
