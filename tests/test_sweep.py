import pytest

from app.domain.common.game_rules import GameRules
from app.domain.game.engine import start_game
from app.domain.lifecycle.rules import join_room, new_room
from app.domain.lifecycle.sweep import sweep_rooms
from app.store.memory_repo import MemoryRepo

RULES = GameRules(words_reveal_sec=5)


class FakeApp:
    def __init__(self, repo):
        self.state = type("State", (), {"repo": repo, "rules": RULES})()


async def _started_room(repo, code, ts):
    room = new_room(code, "p1", "Alice", ts=ts, rules=RULES)
    join_room(room, "p2", "Bob", ts=ts, rules=RULES)
    join_room(room, "p3", "Cara", ts=ts, rules=RULES)
    start_game(room, "p1", ts=ts, rules=RULES)
    await repo.create_room(room)


@pytest.mark.asyncio
async def test_sweep_applies_due_reveal_window():
    repo = MemoryRepo()
    await _started_room(repo, "ABCD", ts=100)

    advanced, evicted = await sweep_rooms(FakeApp(repo), max_age_sec=1800, ts=104)
    assert (advanced, evicted) == ([], [])
    assert (await repo.get_room("ABCD")).phase == "words"

    advanced, evicted = await sweep_rooms(FakeApp(repo), max_age_sec=1800, ts=105)
    assert advanced == ["ABCD"]
    assert (await repo.get_room("ABCD")).phase == "clues"

    # nothing left to do
    advanced, _ = await sweep_rooms(FakeApp(repo), max_age_sec=1800, ts=200)
    assert advanced == []


@pytest.mark.asyncio
async def test_sweep_evicts_old_rooms():
    repo = MemoryRepo()
    await repo.create_room(new_room("OLDR", "p1", "Alice", ts=0))
    await repo.create_room(new_room("NEWR", "p1", "Alice", ts=1500))

    _, evicted = await sweep_rooms(FakeApp(repo), max_age_sec=1800, ts=1800)

    assert evicted == ["OLDR"]
    assert await repo.list_codes() == ["NEWR"]
