"""Config schema for the raycast minigame."""

REQUIRED_PARAMS: dict[str, type] = {}

DEFAULTS = {
    "move_speed": 3.0,
    "strafe_speed": 2.5,
    "turn_speed_deg": 90.0,
    "fov_deg": 70.0,
    "max_ray_steps": 96,
    "flash_ms": 120,
    "max_step_ms": 200,
    "view_columns": 160,
}

OPTIONAL_PARAMS = {
    "move_speed": float,
    "strafe_speed": float,
    "turn_speed_deg": float,
    "fov_deg": float,
    "max_ray_steps": int,
    "flash_ms": int,
    "max_step_ms": int,
    "view_columns": int,
}

PARAM_BOUNDS = {
    "move_speed": (0.0, None),
    "strafe_speed": (0.0, None),
    "turn_speed_deg": (0.0, None),
    "fov_deg": (1.0, 179.0),
    "max_ray_steps": (1, None),
    "flash_ms": (0, None),
    "max_step_ms": (1, None),
    "view_columns": (1, 4096),
}
