"""A single die backed by an injected `RandomSource`."""
from dataclasses import dataclass

from .rng import RandomSource


@dataclass(frozen=True)
class Die:
  """Die with `sides` faces.

  `roll()` reduces the source's raw value modulo `sides`. When the source's
  range is not a multiple of `sides` (e.g. 1..10 on a d6) low faces come up
  slightly more often; this is kept as is.
  """
  sides: int
  source: RandomSource

  def __post_init__(self):
    if self.sides <= 0:
      raise ValueError(f"sides must be positive, got {self.sides}")

  def roll(self) -> int:
    """Return a face in [1, sides]."""
    return self.source.random() % self.sides + 1

  def roll_pair(self) -> tuple[int, int]:
    return self.roll(), self.roll()


__all__ = ["Die"]
