# tests/services/api/conftest.py
from __future__ import annotations
import pytest
from starlette.testclient import TestClient

from transpipe.common.settings import EncoderConfig, Settings
from transpipe.services.api.app import create_app
from transpipe.services.api.deps import get_transcode_service
from transpipe.services.transcode.service import TranscodeService


class FakeHandle:
    """Stands in for a ProcessHandle: yields canned chunks, remembers closing."""

    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.closed = False

    def iter_chunks(self, chunk_size=65536):
        try:
            yield from self.chunks
        finally:
            self.closed = True


class RecordingLauncher:
    def __init__(self):
        self.launches = []
        self.error = None
        self.handles = []

    def launch(self, argv, stderr=None):
        self.launches.append(list(argv))
        if self.error is not None:
            raise self.error
        h = FakeHandle([b"abc", b"def"])
        self.handles.append(h)
        return h


class StaticProbe:
    def __init__(self):
        self.streams = []
        self.error = None

    def probe(self, path):
        if self.error is not None:
            raise self.error
        return self.streams


@pytest.fixture()
def media_root(tmp_path, monkeypatch):
    monkeypatch.setenv("MEDIA_ROOT", str(tmp_path))
    return tmp_path


@pytest.fixture()
def fakes():
    return StaticProbe(), RecordingLauncher()


@pytest.fixture()
def api_client(media_root, fakes):
    """
    A TestClient whose TranscodeService dependency is overridden so that no
    real ffprobe/ffmpeg is ever run.
    """
    probe, launcher = fakes
    app = create_app()
    svc = TranscodeService(probe, launcher, settings=Settings(encoder=EncoderConfig(threads=1)))
    app.dependency_overrides[get_transcode_service] = lambda: svc

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
