# transpipe/services/api/routers/transcode.py
from __future__ import annotations
from datetime import timedelta
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from transpipe.common.logging import get_logger
from transpipe.common.path.safe import safe_join
from transpipe.common.settings import get_settings
from transpipe.domain.enums.profile import TranscodeProfile
from transpipe.domain.errors import LaunchError, ProbeError
from transpipe.domain.policies.profiles import PROFILES
from transpipe.services.api.deps import get_transcode_service
from transpipe.services.schemas import ProfileRead
from transpipe.services.transcode.service import TranscodeService

logger = get_logger(__name__)
cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}/transcode", tags=["transcode"])

# keeps timedelta conversion in range
MAX_SECONDS = 366 * 24 * 3600.0


@router.get("/profiles", response_model=list[ProfileRead])
def list_profiles() -> list[ProfileRead]:
    return [
        ProfileRead(profile=spec.profile.value, mime_type=spec.mime_type, dlna_profile_name=spec.dlna_profile_name)
        for spec in PROFILES.values()
    ]


@router.get("/{profile}")
def stream_transcode(
    profile: str,
    path: str = Query(..., min_length=1, description="Source file, relative to MEDIA_ROOT"),
    start: float = Query(0.0, ge=0, le=MAX_SECONDS, allow_inf_nan=False, description="Start offset in seconds"),
    length: float = Query(
        -1.0,
        ge=-MAX_SECONDS,
        le=MAX_SECONDS,
        allow_inf_nan=False,
        description="Seconds to encode; negative means until the end",
    ),
    svc: TranscodeService = Depends(get_transcode_service),
) -> StreamingResponse:
    try:
        prof = TranscodeProfile(profile)
    except ValueError:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=f"unknown profile {profile!r}")

    try:
        src = safe_join(get_settings().media_root, path)
    except ValueError as e:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(e))

    try:
        handle = svc.run_profile(prof, src, timedelta(seconds=start), timedelta(seconds=length))
    except ProbeError as e:
        raise HTTPException(status_code=HTTPStatus.UNPROCESSABLE_ENTITY, detail=e.message)
    except LaunchError as e:
        logger.error("launch failed for %s: %s", src, e.message)
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=e.message)

    spec = PROFILES[prof]
    headers = {"transferMode.dlna.org": "Streaming"}
    if spec.dlna_profile_name:
        headers["contentFeatures.dlna.org"] = f"DLNA.ORG_PN={spec.dlna_profile_name}"
    return StreamingResponse(
        handle.iter_chunks(get_settings().api.chunk_size),
        media_type=spec.mime_type,
        headers=headers,
    )
