"""Config schema for the fractal viewport minigame."""

REQUIRED_PARAMS: dict[str, type] = {}

DEFAULTS = {
    "grid_width": 128,
    "grid_height": 96,
    "base_iterations": 80,
    "pan_scale": 0.15,
    "min_span": 1e-15,
    "max_span": 4.0,
}

OPTIONAL_PARAMS = {
    "grid_width": int,
    "grid_height": int,
    "base_iterations": int,
    "pan_scale": float,
    "min_span": float,
    "max_span": float,
}

PARAM_BOUNDS = {
    "grid_width": (2, 2048),
    "grid_height": (2, 2048),
    "base_iterations": (1, None),
    "pan_scale": (0.0, 1.0),
    "min_span": (1e-300, 4.0),
    "max_span": (1e-300, None),
}
