from dataclasses import dataclass, field
from enum import Enum
import random

from .consts import KNOCK_OUT_NUMBERS


class GameStatus(Enum):
  NOT_STARTED = "not_started"
  PLAYING = "playing"
  ENDED = "ended"

  def __str__(self) -> str:  # pragma: no cover - tiny convenience
    return self.value


class EndReason(Enum):
  """Which terminal condition ended the game."""
  ALL_KNOCKED_OUT = "all_knocked_out"
  SCORE_REACHED = "score_reached"

  def __str__(self) -> str:  # pragma: no cover - tiny convenience
    return self.value


@dataclass
class Player:
  """A player in a game of Knock Out!.

  `id` and `knock_out_number` are fixed for the player's lifetime. The
  score only grows while the player is active and `knocked_out` flips
  once; both are changed through `add_score` and `knock_out` only.
  """
  id: int
  knock_out_number: int
  score: int = field(default=0, init=False)
  knocked_out: bool = field(default=False, init=False)

  def __post_init__(self):
    if self.knock_out_number not in KNOCK_OUT_NUMBERS:
      raise ValueError(f"knock_out_number must be one of {KNOCK_OUT_NUMBERS}, got {self.knock_out_number}")

  @classmethod
  def new(cls, id: int, rng: random.Random) -> "Player":
    """Create a player whose knock-out number is drawn uniformly from `KNOCK_OUT_NUMBERS`."""
    return cls(id=id, knock_out_number=rng.choice(KNOCK_OUT_NUMBERS))

  @property
  def is_active(self) -> bool:
    return not self.knocked_out

  def add_score(self, amount: int) -> int:
    if amount < 0:
      raise ValueError(f"score increment must be non-negative, got {amount}")
    if self.knocked_out:
      raise RuntimeError(f"Player {self.id} is knocked out; score is frozen")
    self.score += amount
    return self.score

  def knock_out(self) -> None:
    if self.knocked_out:
      raise RuntimeError(f"Player {self.id} is already knocked out")
    self.knocked_out = True

  def __str__(self) -> str:
    status = "out" if self.knocked_out else "in"
    return f"Player #{self.id} [ko={self.knock_out_number}] score={self.score} ({status})"
