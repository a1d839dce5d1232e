"""Top-level package exports for the knockout project.

Expose a small, stable API so callers can `from knockout import KnockOut`.
"""

from .consts import GameConfig
from .dice import Die
from .engine import GameRecord, GameTooLongError, KnockOut, TurnRecord
from .observer import DiceGameTracker, GameObserver, ObserverGroup
from .rng import OneThroughOneHundred, OneThroughTen, RandomSource
from .state import EndReason, GameStatus, Player

__all__ = [
  "GameConfig",
  "Die",
  "KnockOut",
  "GameRecord",
  "TurnRecord",
  "GameTooLongError",
  "GameObserver",
  "ObserverGroup",
  "DiceGameTracker",
  "RandomSource",
  "OneThroughTen",
  "OneThroughOneHundred",
  "EndReason",
  "GameStatus",
  "Player",
]
