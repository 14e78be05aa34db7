import pytest

from travel_explorer.config import Config
from travel_explorer.services.session_manager import SessionManager


@pytest.mark.asyncio
async def test_session_is_shared_and_closed(monkeypatch):
    monkeypatch.setenv("USER_AGENT", "TestAgent/1.0")
    manager = SessionManager(Config())

    session = await manager.get_session()
    assert await manager.get_session() is session
    assert session.headers["User-Agent"] == "TestAgent/1.0"

    await manager.close()
    assert session.closed


@pytest.mark.asyncio
async def test_context_manager_reopens_after_close():
    manager = SessionManager(Config())
    async with manager as first:
        assert not first.closed
    assert first.closed

    second = await manager.get_session()
    assert second is not first
    await manager.close()
