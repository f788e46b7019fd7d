import pytest

from app.domain.common.game_rules import GameRules
from app.domain.game.handlers import (
    handle_advance_phase,
    handle_new_game,
    handle_start_game,
    handle_submit_clue,
    handle_submit_vote,
)
from app.domain.lifecycle.handlers import (
    handle_create_room,
    handle_join,
    handle_leave,
    handle_snapshot,
)
from app.store.memory_repo import MemoryRepo
from app.transport.dispatcher import _HANDLERS, dispatch_message
from app.transport.protocols import _INCOMING_BY_TYPE, InCreateRoom


class FakeApp:
    def __init__(self, repo, rules=None):
        self.state = type("State", (), {"repo": repo, "rules": rules or GameRules(words_reveal_sec=0)})()


class Msg:
    def __init__(self, **fields):
        self.__dict__.update(fields)


def _types(events):
    return [getattr(e, "type", "") for e in events]


async def _lobby(app, n=3):
    to_sender, _ = await handle_create_room(
        app=app, room_code="", pid="p1", msg=Msg(player_id="p1", player_name="Alice")
    )
    code = to_sender[0].room_id
    for i in range(2, n + 1):
        await handle_join(app=app, room_code=code, pid=f"p{i}", msg=Msg(player_name=f"Player {i}"))
    return code


@pytest.mark.asyncio
async def test_create_room_returns_code_and_host_snapshot():
    repo = MemoryRepo()
    app = FakeApp(repo)

    to_sender, to_room = await handle_create_room(
        app=app, room_code="", pid="p1", msg=Msg(player_id="p1", player_name="Alice")
    )

    assert _types(to_sender) == ["room_created", "room_snapshot"]
    code = to_sender[0].room_id
    assert len(code) == 4 and code.isupper()
    assert await repo.room_exists(code)
    assert to_sender[1].room["players"][0]["isHost"] is True


@pytest.mark.asyncio
async def test_join_unknown_room():
    app = FakeApp(MemoryRepo())
    to_sender, to_room = await handle_join(app=app, room_code="ZZZZ", pid="p1", msg=Msg(player_name="A"))
    assert to_sender[0].type == "error"
    assert to_sender[0].code == "ROOM_NOT_FOUND"


@pytest.mark.asyncio
async def test_join_broadcasts_player_joined():
    app = FakeApp(MemoryRepo())
    code = await _lobby(app, n=1)

    to_sender, to_room = await handle_join(app=app, room_code=code, pid="p2", msg=Msg(player_name="Bob"))

    assert _types(to_sender) == ["room_snapshot"]
    assert _types(to_room) == ["player_joined"]
    assert len(to_sender[0].room["players"]) == 2


@pytest.mark.asyncio
async def test_failed_start_does_not_touch_stored_room():
    repo = MemoryRepo()
    app = FakeApp(repo)
    code = await _lobby(app, n=2)
    before = await repo.get_room(code)

    to_sender, _ = await handle_start_game(app=app, room_code=code, pid="p1", msg=Msg())

    assert to_sender[0].code == "NOT_ENOUGH_PLAYERS"
    assert await repo.get_room(code) == before


@pytest.mark.asyncio
async def test_non_host_start_is_forbidden():
    app = FakeApp(MemoryRepo())
    code = await _lobby(app)
    to_sender, _ = await handle_start_game(app=app, room_code=code, pid="p2", msg=Msg())
    assert to_sender[0].code == "FORBIDDEN"


@pytest.mark.asyncio
async def test_full_game_through_handlers():
    repo = MemoryRepo()
    app = FakeApp(repo)
    code = await _lobby(app)

    to_sender, to_room = await handle_start_game(app=app, room_code=code, pid="p1", msg=Msg())
    assert _types(to_room) == ["phase_changed"]
    assert to_room[0].phase == "words"
    # the starter sees their own word, nobody else's
    players = to_sender[0].room["players"]
    assert players[0]["word"] is not None
    assert players[1]["word"] is None

    await handle_advance_phase(app=app, room_code=code, pid="p1", msg=Msg())
    for pid in ("p1", "p2", "p3"):
        to_sender, to_room = await handle_submit_clue(app=app, room_code=code, pid=pid, msg=Msg(clue=f"clue {pid}"))
    assert to_room[0].phase == "voting"

    imposter = (await repo.get_room(code)).imposter_id
    civilians = [pid for pid in ("p1", "p2", "p3") if pid != imposter]
    for pid in civilians:
        to_sender, to_room = await handle_submit_vote(
            app=app, room_code=code, pid=pid, msg=Msg(target_player_id=imposter)
        )
    assert to_room == []

    to_sender, to_room = await handle_advance_phase(app=app, room_code=code, pid="p1", msg=Msg())
    assert _types(to_room) == ["phase_changed", "game_end"]
    assert to_room[1].winner == "civilians"
    assert to_room[1].imposter_id == imposter

    stored = await repo.get_room(code)
    assert stored.phase == "gameOver"

    to_sender, to_room = await handle_new_game(app=app, room_code=code, pid="p1", msg=Msg())
    assert to_sender[0].room["phase"] == "lobby"


@pytest.mark.asyncio
async def test_vote_in_wrong_phase():
    app = FakeApp(MemoryRepo())
    code = await _lobby(app)
    to_sender, _ = await handle_submit_vote(app=app, room_code=code, pid="p1", msg=Msg(target_player_id="p2"))
    assert to_sender[0].code == "BAD_PHASE"


@pytest.mark.asyncio
async def test_snapshot_applies_due_reveal_window(monkeypatch):
    repo = MemoryRepo()
    app = FakeApp(repo, rules=GameRules(words_reveal_sec=5))
    code = await _lobby(app)
    await handle_start_game(app=app, room_code=code, pid="p1", msg=Msg())
    started = await repo.get_room(code)

    monkeypatch.setattr("app.domain.lifecycle.handlers.now_ts", lambda: started.phase_ends_at)
    to_sender, _ = await handle_snapshot(app=app, room_code=code, pid="p2", msg=Msg())

    assert to_sender[0].room["phase"] == "clues"
    assert (await repo.get_room(code)).phase == "clues"


@pytest.mark.asyncio
async def test_snapshot_unknown_room():
    app = FakeApp(MemoryRepo())
    to_sender, _ = await handle_snapshot(app=app, room_code="NOPE", pid=None, msg=Msg())
    assert to_sender[0].code == "ROOM_NOT_FOUND"


@pytest.mark.asyncio
async def test_repeated_snapshots_are_identical():
    app = FakeApp(MemoryRepo())
    code = await _lobby(app)
    await handle_start_game(app=app, room_code=code, pid="p1", msg=Msg())

    a, _ = await handle_snapshot(app=app, room_code=code, pid="p2", msg=Msg())
    b, _ = await handle_snapshot(app=app, room_code=code, pid="p2", msg=Msg())
    assert a[0].model_dump() == b[0].model_dump()


@pytest.mark.asyncio
async def test_last_leave_deletes_room():
    repo = MemoryRepo()
    app = FakeApp(repo)
    code = await _lobby(app, n=2)

    to_sender, to_room = await handle_leave(app=app, room_code=code, pid="p1", msg=Msg())
    assert to_sender[0].room["players"][0]["isHost"] is True
    assert _types(to_room) == ["player_left"]

    to_sender, _ = await handle_leave(app=app, room_code=code, pid="p2", msg=Msg())
    assert _types(to_sender) == ["room_closed"]
    assert not await repo.room_exists(code)


@pytest.mark.asyncio
async def test_leave_unknown_room_is_soft():
    app = FakeApp(MemoryRepo())
    to_sender, _ = await handle_leave(app=app, room_code="GONE", pid="p1", msg=Msg())
    assert _types(to_sender) == ["room_closed"]


class CountingRepo(MemoryRepo):
    def __init__(self):
        super().__init__()
        self.saves = 0

    async def save_room(self, room):
        self.saves += 1
        await super().save_room(room)


@pytest.mark.asyncio
async def test_exhausted_code_space_is_reported(monkeypatch):
    repo = MemoryRepo()
    app = FakeApp(repo)
    monkeypatch.setattr("app.store.memory_repo.gen_room_code", lambda n: "AAAA")
    await handle_create_room(app=app, room_code="", pid="p1", msg=Msg(player_id="p1", player_name="Alice"))

    to_sender, to_room = await handle_create_room(
        app=app, room_code="", pid="p2", msg=Msg(player_id="p2", player_name="Bob")
    )

    assert to_sender[0].code == "NO_ROOM_CODE"
    assert to_room == []
    assert await repo.list_codes() == ["AAAA"]


@pytest.mark.asyncio
async def test_exhausted_code_space_over_dispatcher(monkeypatch):
    app = FakeApp(MemoryRepo())
    monkeypatch.setattr("app.store.memory_repo.gen_room_code", lambda n: "AAAA")
    await dispatch_message(app=app, raw={"type": "create_room", "playerId": "p1", "playerName": "Alice"})

    to_sender, _ = await dispatch_message(app=app, raw={"type": "create_room", "playerId": "p2", "playerName": "Bob"})

    assert to_sender == [{"type": "error", "code": "NO_ROOM_CODE", "message": to_sender[0]["message"]}]


@pytest.mark.asyncio
async def test_snapshot_writes_only_when_room_advanced(monkeypatch):
    repo = CountingRepo()
    app = FakeApp(repo, rules=GameRules(words_reveal_sec=5))
    code = await _lobby(app)
    await handle_start_game(app=app, room_code=code, pid="p1", msg=Msg())
    deadline = (await repo.get_room(code)).phase_ends_at
    saves = repo.saves

    monkeypatch.setattr("app.domain.lifecycle.handlers.now_ts", lambda: deadline - 1)
    for _ in range(3):
        await handle_snapshot(app=app, room_code=code, pid="p2", msg=Msg())
    assert repo.saves == saves

    monkeypatch.setattr("app.domain.lifecycle.handlers.now_ts", lambda: deadline)
    to_sender, _ = await handle_snapshot(app=app, room_code=code, pid="p2", msg=Msg())
    assert to_sender[0].room["phase"] == "clues"
    assert repo.saves == saves + 1


def test_every_room_message_has_a_handler():
    routed = set(_HANDLERS) | {InCreateRoom}
    assert routed == set(_INCOMING_BY_TYPE.values())
