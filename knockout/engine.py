"""The Knock Out! game engine.

`KnockOut` owns a die, the players and an optional observer, and runs the
turn loop in `play()`. After a game ends `export()` returns a `GameRecord`
that can be saved and replayed.
"""

import logging
import random
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel
from pydantic.dataclasses import dataclass as pydantic_dataclass

from .consts import WINNING_SCORE, GameConfig
from .dice import Die
from .observer import GameObserver
from .rng import SOURCE_SEED_GENERATOR, RandomSource
from .state import EndReason, GameStatus, Player

logger = logging.getLogger(__name__)

_NO_OBSERVER = GameObserver()


class GameTooLongError(RuntimeError):
  """Raised when a game runs past its configured `max_turns`."""


@pydantic_dataclass(frozen=True)
class TurnRecord:
  turn: int
  player_id: int
  roll: int
  score: int
  knocked_out: bool


class KnockOut:
  """A game of Knock Out!.

  Players take turns in id order rolling the die twice. Rolling your own
  knock-out number takes you out of the game; any other roll is added to
  your score. The game ends as soon as every player is out or one player
  reaches the winning score, and observers hear about the end exactly once
  whichever way it happened.
  """

  config: GameConfig
  dice: Die
  players: list[Player]
  observer: GameObserver | None
  status: GameStatus
  _seed: int
  _rng: random.Random
  _history: list[TurnRecord]
  _end_reason: EndReason | None
  _winner: Player | None

  def __init__(
      self,
      num_players: int | None = None,
      *,
      config: GameConfig | None = None,
      source: RandomSource | None = None,
      seed: int | None = None,
      rng: random.Random | None = None,
      knock_out_numbers: Sequence[int] | None = None,
      observer: GameObserver | None = None,
  ) -> None:
    if num_players is None:
      if config is None:
        raise ValueError("Either num_players or config must be provided")
      num_players = config.num_players
    if num_players < 1:
      raise ValueError(f"A game needs at least one player, got {num_players}")
    if config is None:
      config = GameConfig(num_players=num_players)
    elif config.num_players != num_players:
      config = GameConfig.deserialize({**config.serialize(), "num_players": num_players})
    self.config = config

    if seed is None:
      seed = SOURCE_SEED_GENERATOR()
    self._seed = seed
    # the dice and the knock-out draws each get their own stream from the game seed
    parent = random.Random(seed)
    source_seed = parent.randint(0, 2**31 - 1)
    draw_seed = parent.randint(0, 2**31 - 1)
    if source is None:
      source = RandomSource.from_name(config.source, seed=source_seed)
    self.dice = Die(sides=config.dice_sides, source=source)

    if knock_out_numbers is not None:
      if rng is not None:
        raise ValueError("Pass either rng or knock_out_numbers, not both")
      if len(knock_out_numbers) != num_players:
        raise ValueError(f"Expected {num_players} knock-out numbers, got {len(knock_out_numbers)}")
      self._rng = random.Random(draw_seed)
      self.players = [Player(id=i, knock_out_number=n) for i, n in enumerate(knock_out_numbers, start=1)]
    else:
      self._rng = rng if rng is not None else random.Random(draw_seed)
      self.players = [Player.new(i, self._rng) for i in range(1, num_players + 1)]

    self.observer = observer
    self.status = GameStatus.NOT_STARTED
    self._history = []
    self._end_reason = None
    self._winner = None

  @property
  def seed(self) -> int:
    return self._seed

  @property
  def end_reason(self) -> EndReason | None:
    return self._end_reason

  @property
  def history(self) -> list[TurnRecord]:
    return list(self._history)

  @property
  def turn_count(self) -> int:
    return len(self._history)

  def active_players(self) -> list[Player]:
    return [p for p in self.players if not p.knocked_out]

  def winner(self) -> Player | None:
    """Return the player who reached the winning score, if any."""
    return self._winner

  def _notify(self) -> GameObserver:
    return self.observer if self.observer is not None else _NO_OBSERVER

  def play(self) -> None:
    """Play the game to the end. May only be called once per instance."""
    if self.status != GameStatus.NOT_STARTED:
      raise RuntimeError(f"Game already {self.status.value}; play() may only be called once")
    self.status = GameStatus.PLAYING
    self._notify().game_did_start(self)

    while self._end_reason is None:
      for player in self.players:
        if player.knocked_out:
          continue
        self._take_turn(player)
        if self._end_reason is not None:
          break

    self.status = GameStatus.ENDED
    self._notify().game_did_end(self)

  def _take_turn(self, player: Player) -> TurnRecord:
    max_turns = self.config.max_turns
    if max_turns is not None and self.turn_count >= max_turns:
      raise GameTooLongError(f"Game did not finish within {max_turns} turns")

    dice_roll_sum = sum(self.dice.roll_pair())
    logger.debug(f"Turn {self.turn_count + 1}: player {player.id} rolled {dice_roll_sum}")
    self._notify().game_did_take_turn(self, player, dice_roll_sum)

    if dice_roll_sum == player.knock_out_number:
      player.knock_out()
      logger.info(f"Player: {player.id} is knocked out by rolling {player.knock_out_number}")
      if not self.active_players():
        self._end_reason = EndReason.ALL_KNOCKED_OUT
        logger.info("All players have been knocked out!")
    else:
      player.add_score(dice_roll_sum)
      if player.score >= WINNING_SCORE:
        self._end_reason = EndReason.SCORE_REACHED
        self._winner = player
        logger.info(f"Player: {player.id} has won with a final score of {player.score}")

    record = TurnRecord(
        turn=self.turn_count + 1,
        player_id=player.id,
        roll=dice_roll_sum,
        score=player.score,
        knocked_out=player.knocked_out,
    )
    self._history.append(record)
    return record

  def print_summary(self) -> None:
    """Print a short, human-readable summary of the game."""
    print(f"Knock Out! status={self.status.value} turns={self.turn_count} dice=d{self.dice.sides}")
    for p in self.players:
      print(f"  {p}")
    if self._winner is not None:
      print(f"Winner: player {self._winner.id} with {self._winner.score} points")
    elif self._end_reason == EndReason.ALL_KNOCKED_OUT:
      print("No winner: all players have been knocked out")

  def export(self) -> "GameRecord":
    """Export this game's setup and turn history as a GameRecord."""
    return GameRecord(
      config=self.config,
      knock_out_numbers=[p.knock_out_number for p in self.players],
      history=self.history,
      winner_id=self._winner.id if self._winner is not None else None,
      end_reason=self._end_reason,
      metadata={
        'seed': self._seed,
        'source': type(self.dice.source).__name__,
      },
    )


class GameRecord(BaseModel):
  config: GameConfig
  knock_out_numbers: list[int]
  history: list[TurnRecord]
  winner_id: int | None = None
  end_reason: EndReason | None = None
  metadata: dict[str, Any]  # seed and source name

  def replay(self, observer: GameObserver | None = None) -> KnockOut:
    """Play the recorded game again and return the new game.

    Players get the recorded knock-out numbers and the dice are rebuilt from
    the recorded seed, so only games whose dice were driven by the source
    named in their config can be replayed.
    """
    source_name = self.metadata.get('source')
    if source_name != self.config.source:
      raise ValueError(f"Cannot replay a game driven by source {source_name!r}")
    game = KnockOut(
      config=self.config,
      seed=self.metadata['seed'],
      knock_out_numbers=self.knock_out_numbers,
      observer=observer,
    )
    game.play()
    return game


__all__ = ["KnockOut", "GameRecord", "TurnRecord", "GameTooLongError"]
