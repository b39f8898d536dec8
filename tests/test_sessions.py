import pytest

from jobmatch.sessions import SessionStore


@pytest.mark.asyncio
async def test_unknown_id_creates_new_session(settings, completion_client) -> None:
    store = SessionStore(settings, completion_client)

    session = await store.get_or_create("does-not-exist")
    assert session.session_id != "does-not-exist"
    assert session.session_id in store
    assert await store.get_or_create(session.session_id) is session


@pytest.mark.asyncio
async def test_sessions_do_not_share_state(settings, completion_client) -> None:
    store = SessionStore(settings, completion_client)
    a = await store.get_or_create(None)
    b = await store.get_or_create(None)

    await a.chat.submit("only in a")
    assert len(a.chat.turns) == 3
    assert len(b.chat.turns) == 1
    assert a.recommendations is not b.recommendations


@pytest.mark.asyncio
async def test_least_recently_used_session_is_evicted_and_closed(settings, completion_client) -> None:
    settings.max_sessions = 2
    store = SessionStore(settings, completion_client)
    first = await store.get_or_create(None)
    second = await store.get_or_create(None)
    store.get(first.session_id)

    third = await store.get_or_create(None)

    assert len(store) == 2
    assert second.session_id not in store
    assert second.chat.closed
    assert first.session_id in store and third.session_id in store


@pytest.mark.asyncio
async def test_close_removes_session(settings, completion_client) -> None:
    store = SessionStore(settings, completion_client)
    session = await store.get_or_create(None)

    assert await store.close(session.session_id)
    assert session.chat.closed
    assert session.session_id not in store
    assert not await store.close(session.session_id)
    assert not await store.close(None)
