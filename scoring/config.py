"""
Scoring engine settings
"""
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class ScoringSettings(BaseSettings):
    """Scoring settings (env prefix SCORING_)"""

    # Continental ranking
    default_scope: str = Field(default="Europe", description="Scope of official records used by default")
    record_points_scale: float = Field(default=1000.0, description="Points for matching the record exactly")
    duplicate_policy: Literal["keep_all", "best", "latest"] = Field(
        default="keep_all", description="How several personal records for one event are handled"
    )

    # Group leaderboard
    rank_formula: Literal["rank", "odd"] = Field(
        default="rank", description="rank: points = rank, odd: points = 2*rank - 1"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Console log level")
    log_dir: str = Field(default="logs", description="Directory of rotated log files")

    class Config:
        env_prefix = "SCORING_"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_scoring_settings() -> ScoringSettings:
    return ScoringSettings()


# Global settings instance
scoring_config = get_scoring_settings()
