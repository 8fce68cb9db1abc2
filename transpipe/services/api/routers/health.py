# transpipe/services/api/routers/health.py
from __future__ import annotations
from fastapi import APIRouter, Depends
from transpipe.common.settings import get_settings
from transpipe.services.api.deps import get_launcher
from transpipe.services.process.pipe_launcher import PipeLauncher

router = APIRouter()

@router.get("/healthz")
def healthz(launcher: PipeLauncher = Depends(get_launcher)):
    s = get_settings()
    st = launcher.reapers.stats()
    return {
        "ok": True,
        "app": s.app_name,
        "env": s.app_env,
        # each in-flight reaper is one running encoder
        "encoders_running": st.in_flight,
        "encoders_started": st.tasks_submitted,
    }
