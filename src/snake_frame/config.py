from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .models import BoundaryPolicy, FoodMotion, FoodPolicy, Position


class ConfigError(RuntimeError):
    """Raised when required runtime configuration is missing or invalid."""


ALLOWED_DECAY_FACTORS = (0.90, 0.95)
ALLOWED_BOUNDARY_POLICIES = {policy.value for policy in BoundaryPolicy}
ALLOWED_FOOD_POLICIES = {policy.value for policy in FoodPolicy}
ALLOWED_FOOD_MOTIONS = {motion.value for motion in FoodMotion}
MIN_GRID_SIZE = 2


@dataclass(slots=True, frozen=True)
class GameConfig:
    """Variant selection for one game engine instance.

    Boundary policy, food placement on eat and food motion are independent
    switches; all of them are fixed for the lifetime of a game.
    """

    grid_size: int = 20
    boundary_policy: BoundaryPolicy = BoundaryPolicy.LETHAL
    food_policy: FoodPolicy = FoodPolicy.AVOID_ON_EAT
    food_motion: FoodMotion = FoodMotion.STATIC
    decay_factor: float = 0.95
    initial_interval_ms: float = 200
    floor_interval_ms: float = 50
    food_motion_interval_ms: float = 1000
    points_per_food: int = 100
    start: Position | None = None

    def __post_init__(self) -> None:
        if self.grid_size < MIN_GRID_SIZE:
            raise ConfigError(f"grid_size must be at least {MIN_GRID_SIZE}, got {self.grid_size}")
        if self.decay_factor not in ALLOWED_DECAY_FACTORS:
            allowed_values = ", ".join(f"{value:.2f}" for value in ALLOWED_DECAY_FACTORS)
            raise ConfigError(f"Invalid decay_factor: {self.decay_factor}. Allowed: {allowed_values}")
        if self.floor_interval_ms <= 0:
            raise ConfigError("floor_interval_ms must be positive")
        if self.initial_interval_ms < self.floor_interval_ms:
            raise ConfigError("initial_interval_ms must not be below floor_interval_ms")
        if self.food_motion_interval_ms <= 0:
            raise ConfigError("food_motion_interval_ms must be positive")
        if self.points_per_food < 0:
            raise ConfigError("points_per_food must not be negative")
        if self.start is not None:
            x, y = self.start
            if not (0 <= x < self.grid_size and 0 <= y < self.grid_size):
                raise ConfigError(f"start position {self.start} is outside a {self.grid_size}x{self.grid_size} grid")

    @property
    def start_position(self) -> Position:
        if self.start is not None:
            return self.start
        center = self.grid_size // 2
        return (center, center)


@dataclass(slots=True)
class Settings:
    telegram_bot_token: str
    owner_telegram_id: int
    command_cooldown_seconds: float
    render_min_interval_seconds: float
    game: GameConfig
    seed: int | None
    log_level: str


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, value)


def _require_str(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigError(f"Missing required environment variable: {name}")
    return value


def _require_int(name: str) -> int:
    value = _require_str(name)
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid integer value for {name}: {value}") from exc


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid integer value for {name}: {value}") from exc


def _get_optional_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return _get_int(name, 0)


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid number for {name}: {value}") from exc


def _get_choice(name: str, default: str, allowed: set[str]) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in allowed:
        allowed_values = ", ".join(sorted(allowed))
        raise ConfigError(f"Invalid value for {name}: {value}. Allowed: {allowed_values}")
    return value


def load_game_config() -> GameConfig:
    return GameConfig(
        grid_size=_get_int("SNAKE_GRID_SIZE", 20),
        boundary_policy=BoundaryPolicy(_get_choice("SNAKE_BOUNDARY_POLICY", "lethal", ALLOWED_BOUNDARY_POLICIES)),
        food_policy=FoodPolicy(_get_choice("SNAKE_FOOD_POLICY", "avoid-on-eat", ALLOWED_FOOD_POLICIES)),
        food_motion=FoodMotion(_get_choice("SNAKE_FOOD_MOTION", "static", ALLOWED_FOOD_MOTIONS)),
        decay_factor=_get_float("SNAKE_DECAY_FACTOR", 0.95),
        initial_interval_ms=_get_float("SNAKE_INITIAL_INTERVAL_MS", 200),
        floor_interval_ms=_get_float("SNAKE_FLOOR_INTERVAL_MS", 50),
        food_motion_interval_ms=_get_float("SNAKE_FOOD_MOTION_INTERVAL_MS", 1000),
    )


def load_settings() -> Settings:
    _load_env_file(Path(".env"))

    return Settings(
        telegram_bot_token=_require_str("TELEGRAM_BOT_TOKEN"),
        owner_telegram_id=_require_int("OWNER_TELEGRAM_ID"),
        command_cooldown_seconds=_get_float("COMMAND_COOLDOWN_SECONDS", 1.0),
        render_min_interval_seconds=_get_float("RENDER_MIN_INTERVAL_SECONDS", 1.0),
        game=load_game_config(),
        seed=_get_optional_int("SNAKE_SEED"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
