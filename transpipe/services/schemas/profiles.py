# transpipe/services/schemas/profiles.py
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field


class ProfileRead(BaseModel):
    profile: str = Field(..., examples=["mpegts"])
    mime_type: str = Field(..., examples=["video/mpeg"])
    dlna_profile_name: Optional[str] = Field(None, examples=["MPEG_PS_PAL"])
