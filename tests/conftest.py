import pytest
from fastapi.testclient import TestClient

from caption_collector.main import app
from caption_collector.session_store import clear_sessions
from caption_collector.transcript import Aggregator, VirtualScheduler


def _iso(ms: int) -> str:
    seconds, millis = divmod(ms, 1000)
    minutes, seconds = divmod(seconds, 60)
    return f"1970-01-01T00:{minutes:02d}:{seconds:02d}.{millis:03d}Z"


@pytest.fixture
def iso():
    """ISO string of the virtual clock ms after the epoch start."""
    return _iso


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture
def aggregator(scheduler: VirtualScheduler) -> Aggregator:
    return Aggregator(
        scheduler=scheduler,
        grace_ms=2000,
        speaker_placeholder=" ",
        reset_clears_last_seen=False,
    )


@pytest.fixture
def client():
    app.state.scheduler_factory = VirtualScheduler
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        clear_sessions()
        del app.state.scheduler_factory
