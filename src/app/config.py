"""Configuration management using Pydantic settings."""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "NEBULA DEFENDER"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Simulation engine
    simulation_width: float = Field(1280.0, gt=0)
    simulation_height: float = Field(720.0, gt=0)
    tick_rate: float = Field(60.0, gt=0)       # driver thread frequency (Hz)
    simulation_seed: Optional[int] = None      # fixed seed for repeatable runs
    wave_policy: Literal["kills", "score"] = "kills"
    autostart: bool = True                     # start the tick thread at boot

    # High score persistence
    highscore_path: str = "data/highscore.json"

    # WebSocket snapshot stream (Hz)
    snapshot_rate: float = Field(20.0, gt=0)


settings = Settings()
