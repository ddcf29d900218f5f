"""Configuration management."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings pulled from HEIGHTMAP_* environment variables."""

    # Grid
    resolution: int = Field(
        default=9, ge=1, le=12, description="Grid side is 2**resolution + 1"
    )

    # Noise
    noise_min: float = Field(default=-1.0, description="Lower displacement bound")
    noise_max: float = Field(default=1.0, description="Upper displacement bound")
    noise_decay: float = Field(
        default=2.0, gt=0, description="Amplitude divisor per subdivision pass"
    )
    seed: Optional[int] = Field(default=None, description="Noise seed")

    # Normalization
    normalize_margin: float = Field(
        default=0.05, ge=0, lt=1, description="Headroom added around the value range"
    )

    # Preview
    tile_count: int = Field(default=3, ge=1, description="Tiles per preview axis")
    tile_spacing: int = Field(default=200, ge=0, description="Gap between tiles in pixels")
    palette: str = Field(default="terrain", description="Matplotlib colormap name")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="plain", description="Logging format (plain, json)")

    @model_validator(mode="after")
    def check_noise_bounds(self) -> "Settings":
        if self.noise_min >= self.noise_max:
            raise ValueError("noise_min must be less than noise_max")
        return self

    @property
    def grid_size(self) -> int:
        """Side length of the generated grid."""
        return 2**self.resolution + 1

    class Config:
        env_prefix = "HEIGHTMAP_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
