import logging
import random

import pytest

from knockout import DiceGameTracker, GameConfig, KnockOut, ObserverGroup
from knockout.engine import GameRecord, GameTooLongError
from knockout.rng import OneThroughTen
from knockout.state import EndReason, GameStatus

from _stubs import CycleSource, FixedChoice, RecordingObserver


def make_game(knock_out_numbers, source_values, **config_kwargs):
  num_players = len(knock_out_numbers)
  observer = RecordingObserver()
  game = KnockOut(
    num_players,
    config=GameConfig(num_players=num_players, **config_kwargs),
    source=CycleSource(source_values),
    rng=FixedChoice(*knock_out_numbers),
    observer=observer,
  )
  return game, observer


def test_invalid_player_count_raises():
  with pytest.raises(ValueError):
    KnockOut(0)
  with pytest.raises(ValueError):
    KnockOut()


def test_players_are_numbered_in_order():
  game = KnockOut(4, seed=1)
  assert [p.id for p in game.players] == [1, 2, 3, 4]
  assert all(p.knock_out_number in (6, 7, 8, 9) for p in game.players)
  assert game.status == GameStatus.NOT_STARTED


def test_num_players_overrides_config():
  game = KnockOut(2, config=GameConfig(num_players=5, dice_sides=8), seed=1)
  assert len(game.players) == 2
  assert game.config.num_players == 2
  assert game.dice.sides == 8


def test_single_player_wins_on_score():
  # every die shows 6, so each turn rolls 12
  game, observer = make_game([6], [5])
  game.play()

  player = game.players[0]
  assert player.score == 108
  assert game.turn_count == 9
  assert game.end_reason == EndReason.SCORE_REACHED
  assert game.winner() is player
  assert game.status == GameStatus.ENDED
  assert observer.events[0] == ("start",)
  assert observer.events[1:-1] == [("turn", 1, 12)] * 9
  assert observer.events[-1] == ("end",)


def test_single_player_knocked_out_on_first_turn():
  # dice show 3 and 4
  game, observer = make_game([7], [2, 3])
  game.play()

  player = game.players[0]
  assert player.knocked_out
  assert player.score == 0
  assert game.end_reason == EndReason.ALL_KNOCKED_OUT
  assert game.winner() is None
  assert observer.events == [("start",), ("turn", 1, 7), ("end",)]


def test_knocked_out_player_is_skipped():
  # turns alternate between rolls of 7 and 12
  game, observer = make_game([7, 9], [2, 3, 5, 5])
  game.play()

  first, second = game.players
  assert first.knocked_out
  assert first.score == 0
  assert [t for t in game.history if t.player_id == 1] == [game.history[0]]
  assert all(e[1] == 2 for e in observer.events[2:-1])
  assert second.score == 107
  assert game.winner() is second
  assert game.turn_count == 12
  assert observer.count("end") == 1


def test_all_players_knocked_out_in_one_pass():
  game, observer = make_game([7, 7], [2, 3])
  game.play()

  assert all(p.knocked_out for p in game.players)
  assert game.active_players() == []
  assert game.end_reason == EndReason.ALL_KNOCKED_OUT
  assert observer.count("turn") == 2
  assert observer.count("end") == 1


def test_score_win_stops_the_pass():
  game, observer = make_game([6, 6, 6], [5])
  game.play()

  assert [p.score for p in game.players] == [108, 96, 96]
  assert game.winner() is game.players[0]
  assert game.turn_count == 8 * 3 + 1
  assert observer.count("end") == 1


def test_score_never_decreases():
  game = KnockOut(5, seed=2024)
  game.play()

  last: dict[int, int] = {}
  for turn in game.history:
    assert turn.score >= last.get(turn.player_id, 0)
    last[turn.player_id] = turn.score
  for p in game.players:
    turns = [t for t in game.history if t.player_id == p.id]
    # a knocked-out player takes no further turns and keeps their score
    assert [t.knocked_out for t in turns[:-1]] == [False] * (len(turns) - 1)
    assert turns[-1].knocked_out == p.knocked_out
    assert turns[-1].score == p.score


def test_turn_records():
  game, _ = make_game([7], [5])
  game.play()
  history = game.history
  assert [t.turn for t in history] == list(range(1, 10))
  assert [t.score for t in history] == [12 * i for i in range(1, 10)]
  assert not any(t.knocked_out for t in history)


@pytest.mark.parametrize("seed", range(20))
def test_random_games_end_exactly_once(seed):
  observer = RecordingObserver()
  game = KnockOut(3, seed=seed, observer=observer)
  game.play()
  assert game.status == GameStatus.ENDED
  assert observer.count("start") == 1
  assert observer.count("end") == 1
  assert observer.count("turn") == game.turn_count
  if game.end_reason == EndReason.SCORE_REACHED:
    assert game.winner().score >= 100
    assert sum(p.score >= 100 for p in game.players) == 1
  else:
    assert game.active_players() == []


def test_same_seed_same_game():
  a = KnockOut(4, seed=99)
  b = KnockOut(4, seed=99)
  a.play()
  b.play()
  assert a.history == b.history
  assert [p.knock_out_number for p in a.players] == [p.knock_out_number for p in b.players]


def test_play_without_observer():
  game = KnockOut(2, source=OneThroughTen(seed=3), seed=3)
  game.play()
  assert game.status == GameStatus.ENDED


def test_play_twice_raises():
  game, _ = make_game([6], [5])
  game.play()
  with pytest.raises(RuntimeError):
    game.play()


def test_max_turns_cap():
  game, observer = make_game([6, 6], [5], max_turns=3)
  with pytest.raises(GameTooLongError):
    game.play()
  assert game.turn_count == 3
  assert observer.count("end") == 0


def test_observer_group_fans_out():
  first, second = RecordingObserver(), RecordingObserver()
  game = KnockOut(2, seed=5, observer=ObserverGroup([first, second]))
  game.play()
  assert first.events == second.events
  assert first.count("end") == 1


def test_tracker_counts_turns(caplog):
  tracker = DiceGameTracker()
  game = KnockOut(
    1,
    source=CycleSource([5]),
    rng=FixedChoice(6),
    observer=tracker,
  )
  with caplog.at_level(logging.INFO):
    game.play()
  assert tracker.number_of_turns == 9
  assert "Started a new game of knockout" in caplog.text
  assert "The game is using a 6 sided dice" in caplog.text
  assert "Player #1 rolled a 12" in caplog.text
  assert "The game lasted for 9 turns" in caplog.text


def test_export_and_replay():
  game = KnockOut(3, seed=11)
  game.play()
  record = game.export()

  assert record.metadata == {"seed": 11, "source": "OneThroughTen"}
  assert record.knock_out_numbers == [p.knock_out_number for p in game.players]
  assert record.end_reason == game.end_reason

  restored = GameRecord.model_validate_json(record.model_dump_json())
  assert restored == record

  replayed = restored.replay()
  assert replayed.history == game.history
  assert replayed.end_reason == game.end_reason


def test_replay_with_custom_source_raises():
  game, _ = make_game([6], [5])
  game.play()
  with pytest.raises(ValueError):
    game.export().replay()


def test_knock_out_draws_independent_of_dice():
  drawn: dict[int, set[int]] = {}
  for seed in range(200):
    game = KnockOut(1, seed=seed)
    first_value = game.dice.source.random()
    drawn.setdefault(first_value, set()).add(game.players[0].knock_out_number)
  # the same first dice value shows up alongside different knock-out numbers
  assert any(len(numbers) > 1 for numbers in drawn.values())


def test_knock_out_numbers_given_explicitly():
  game = KnockOut(3, seed=4, knock_out_numbers=[9, 6, 8])
  assert [p.knock_out_number for p in game.players] == [9, 6, 8]


@pytest.mark.parametrize("numbers", [[6, 7], [6, 7, 8, 9], [6, 7, 5]])
def test_bad_knock_out_numbers_raise(numbers):
  with pytest.raises(ValueError):
    KnockOut(3, seed=4, knock_out_numbers=numbers)


def test_knock_out_numbers_and_rng_are_exclusive():
  with pytest.raises(ValueError):
    KnockOut(1, rng=FixedChoice(6), knock_out_numbers=[6])


def test_replay_keeps_recorded_knock_out_numbers():
  game = KnockOut(3, seed=5, rng=random.Random(12345))
  game.play()
  record = game.export()

  replayed = record.replay()
  assert [p.knock_out_number for p in replayed.players] == record.knock_out_numbers
  assert replayed.history == game.history
  assert replayed.end_reason == game.end_reason
