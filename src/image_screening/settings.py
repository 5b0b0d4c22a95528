from typing import Literal, Optional, Tuple

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .aggregation import MODERATE_RISK_THRESHOLD


class Settings(BaseSettings):
    min_skin_ratio: float = 0.10
    model_threshold: float = 0.5
    probability_mode: Literal["derived", "independent"] = "derived"
    high_risk_threshold: Optional[float] = None

    yolo_model: Optional[str] = None
    device: str = "cpu"

    # Enforced by the image provider, not by the pipeline itself.
    max_image_bytes: int = 10 * 1024 * 1024
    accepted_extensions: Tuple[str, ...] = (".jpeg", ".jpg", ".png", ".gif", ".bmp", ".webp")

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SCREENING_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("min_skin_ratio", "model_threshold")
    @classmethod
    def must_be_fraction(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("value must be between 0.0 and 1.0")
        return v

    @field_validator("high_risk_threshold")
    @classmethod
    def high_threshold_above_moderate(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not MODERATE_RISK_THRESHOLD < v <= 1.0:
            raise ValueError(
                f"high_risk_threshold must be above {MODERATE_RISK_THRESHOLD} and at most 1.0"
            )
        return v
