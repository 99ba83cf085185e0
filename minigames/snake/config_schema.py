"""Config schema for the snake minigame."""

REQUIRED_PARAMS: dict[str, type] = {}

DEFAULTS = {
    "columns": 24,
    "rows": 18,
    "tick_ms": 150,
    "food_attempts": 1000,
}

OPTIONAL_PARAMS = {
    "columns": int,
    "rows": int,
    "tick_ms": int,
    "food_attempts": int,
}

# A two-cell snake must fit at spawn.
PARAM_BOUNDS = {
    "columns": (2, 256),
    "rows": (1, 256),
    "tick_ms": (1, None),
    "food_attempts": (1, None),
}
