"""
Central configuration for the procedural scene engine.
All budget constants, styling defaults and camera limits live here.
"""

from __future__ import annotations

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings loaded from environment / .env file."""

    # ── Styling ─────────────────────────────────────────────────────
    LINE_COLOR: str = "#509EF0"

    # ── Resource budgets ────────────────────────────────────────────
    MAX_LINES_PER_ALGORITHM: int = 1000
    MAX_TOTAL_LINES: int = 3000
    MAX_ALGORITHMS: int = 6
    SLOW_ALGORITHM_SECONDS: float = 1.0

    # ── Camera ──────────────────────────────────────────────────────
    DEFAULT_CAMERA_POSITION: tuple[float, float, float] = (0.0, 0.0, 12.0)
    DEFAULT_CAMERA_LOOK_AT: tuple[float, float, float] = (0.0, 0.0, 0.0)
    CAMERA_POSITION_LIMIT: float = 50.0
    CAMERA_LOOK_AT_LIMIT: float = 20.0

    # ── Scene text ──────────────────────────────────────────────────
    DEFAULT_TITLE: str = "Procedural Scene"
    DEFAULT_DESCRIPTION: str = "Generated from procedural algorithms"
    MAX_TITLE_LENGTH: int = 200
    MAX_DESCRIPTION_LENGTH: int = 1000

    # ── Logging ─────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def _check_budgets(self) -> Settings:
        self.MAX_TOTAL_LINES = max(1, self.MAX_TOTAL_LINES)
        self.MAX_LINES_PER_ALGORITHM = max(
            1, min(self.MAX_LINES_PER_ALGORITHM, self.MAX_TOTAL_LINES)
        )
        self.MAX_ALGORITHMS = max(1, self.MAX_ALGORITHMS)
        return self

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton instance
settings = Settings()
