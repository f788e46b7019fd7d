import random

import pytest

from app.domain.common.errors import Forbidden, InsufficientPlayers, InvalidPhase
from app.domain.common.game_rules import GameRules
from app.domain.game.engine import start_game
from app.domain.lifecycle.rules import join_room, new_room


def _lobby(n: int):
    room = new_room("ABCD", "p1", "Alice", ts=0)
    for i in range(2, n + 1):
        join_room(room, f"p{i}", f"Player {i}", ts=0)
    return room


@pytest.mark.parametrize("n", [1, 2])
def test_start_game_needs_three_players(n):
    room = _lobby(n)
    before = room.model_copy(deep=True)

    with pytest.raises(InsufficientPlayers):
        start_game(room, "p1", ts=10)

    assert room == before
    assert room.phase == "lobby"


@pytest.mark.parametrize("n", [3, 4, 8])
def test_start_game_assigns_exactly_one_imposter(n):
    room = _lobby(n)
    start_game(room, "p1", ts=10, rng=random.Random(n))

    assert room.phase == "words"
    assert room.game_started is True
    assert room.current_round == 1

    imposters = [p for p in room.players if p.is_imposter]
    assert len(imposters) == 1
    assert imposters[0].pid == room.imposter_id
    assert imposters[0].word == room.word_pair.imposter

    civilian_words = {p.word for p in room.players if not p.is_imposter}
    assert civilian_words == {room.word_pair.civilian}
    assert imposters[0].word not in civilian_words


def test_start_game_is_host_only():
    room = _lobby(3)

    with pytest.raises(Forbidden):
        start_game(room, "p2", ts=10)
    with pytest.raises(Forbidden):
        start_game(room, "stranger", ts=10)
    assert room.phase == "lobby"


def test_start_game_twice_is_bad_phase():
    room = _lobby(3)
    start_game(room, "p1", ts=10)

    with pytest.raises(InvalidPhase):
        start_game(room, "p1", ts=11)


def test_start_game_arms_reveal_deadline():
    room = _lobby(3)
    start_game(room, "p1", ts=100, rules=GameRules(words_reveal_sec=7))
    assert room.phase_ends_at == 107

    manual = _lobby(3)
    start_game(manual, "p1", ts=100, rules=GameRules(words_reveal_sec=0))
    assert manual.phase_ends_at == 0


def test_start_game_uses_configured_catalog():
    room = _lobby(3)
    rules = GameRules(word_pairs=(("SALT", "PEPPER"), ("SALT", "SUGAR")))
    start_game(room, "p1", ts=0, rules=rules, rng=random.Random(3))

    assert room.word_pair.civilian == "SALT"
    assert room.word_pair.imposter in ("PEPPER", "SUGAR")


def test_same_seed_same_assignment():
    a, b = _lobby(5), _lobby(5)
    start_game(a, "p1", ts=0, rng=random.Random("ABCD:0"))
    start_game(b, "p1", ts=0, rng=random.Random("ABCD:0"))

    assert a.imposter_id == b.imposter_id
    assert a.word_pair == b.word_pair
