"""Observers notified as a game of Knock Out! progresses.

`GameObserver` hooks are no-ops by default; subclasses override the ones
they care about.
"""
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .state import Player

if TYPE_CHECKING:
  from .engine import KnockOut

logger = logging.getLogger(__name__)


class GameObserver:

  def game_did_start(self, game: "KnockOut") -> None:
    pass

  def game_did_take_turn(self, game: "KnockOut", player: Player, dice_roll: int) -> None:
    """Called after `player` rolled `dice_roll`, before the roll is scored."""
    pass

  def game_did_end(self, game: "KnockOut") -> None:
    pass


class ObserverGroup(GameObserver):
  """Forward every notification to each observer, in order."""

  def __init__(self, observers: Iterable[GameObserver] = ()) -> None:
    self.observers: list[GameObserver] = list(observers)

  def add(self, observer: GameObserver) -> None:
    self.observers.append(observer)

  def game_did_start(self, game: "KnockOut") -> None:
    for observer in self.observers:
      observer.game_did_start(game)

  def game_did_take_turn(self, game: "KnockOut", player: Player, dice_roll: int) -> None:
    for observer in self.observers:
      observer.game_did_take_turn(game, player, dice_roll)

  def game_did_end(self, game: "KnockOut") -> None:
    for observer in self.observers:
      observer.game_did_end(game)


class DiceGameTracker(GameObserver):
  """Count the turns of a game and report its progress to the log."""

  def __init__(self) -> None:
    self.number_of_turns = 0

  def game_did_start(self, game: "KnockOut") -> None:
    self.number_of_turns = 0
    logger.info("Started a new game of knockout")
    logger.info(f"The game is using a {game.dice.sides} sided dice")

  def game_did_take_turn(self, game: "KnockOut", player: Player, dice_roll: int) -> None:
    self.number_of_turns += 1
    logger.info(f"Player #{player.id} rolled a {dice_roll}")

  def game_did_end(self, game: "KnockOut") -> None:
    logger.info(f"The game lasted for {self.number_of_turns} turns")


__all__ = ["GameObserver", "ObserverGroup", "DiceGameTracker"]
