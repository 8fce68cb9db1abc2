# transpipe/common/settings.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    prefix: str = "/api"
    # bytes handed to the response writer per read of encoder stdout
    chunk_size: int = Field(64 * 1024, ge=1024)


class EncoderConfig(BaseModel):
    ffmpeg_bin: str = "ffmpeg"
    avconv_bin: str = "avconv"
    # None -> host CPU count
    threads: Optional[int] = Field(default=None, ge=1)


class FFProbeConfig(BaseModel):
    bin: str = "ffprobe"
    timeout_sec: int = 30
    log_level: str = "error"  # quiet|panic|fatal|error|warning|info|verbose|debug|trace


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "transpipe"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"

    # -------- Paths --------
    media_root: Path = Path("/srv/media")

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    encoder: EncoderConfig = EncoderConfig()
    ffprobe: FFProbeConfig = FFProbeConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return str(v).strip().upper() if v is not None else "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from transpipe.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()  # pydantic_settings will read from .env automatically
