"""Random number sources used to drive the dice.

A source owns its own `random.Random` so games are reproducible from a seed
and never touch the module-level random state.
"""
import random
from typing import ClassVar

def SOURCE_SEED_GENERATOR(): return random.Random().randint(0, 2**31 - 1)


class RandomSource:
  """Produce a bounded random integer on demand.

  Subclasses implement `random()`; the range is up to each variant.
  """

  source_name_to_cls: ClassVar[dict[str, type["RandomSource"]]] = {}

  def __init__(self, *, seed: int | None = None) -> None:
    if seed is None:
      seed = SOURCE_SEED_GENERATOR()
    self._seed = seed
    self.rng = random.Random(seed)

  @classmethod
  def __init_subclass__(cls):
    # register subclasses so configs can refer to them by name
    cls.source_name_to_cls[cls.__name__] = cls
    super().__init_subclass__()

  @classmethod
  def from_name(cls, name: str, *, seed: int | None = None) -> "RandomSource":
    source_cls = cls.source_name_to_cls.get(name)
    if source_cls is None:
      raise ValueError(f"Unknown random source name: {name}")
    return source_cls(seed=seed)

  @property
  def seed(self) -> int:
    return self._seed

  def reset(self, seed: int | None = None) -> None:
    if seed is None:
      seed = SOURCE_SEED_GENERATOR()
    self._seed = seed
    self.rng.seed(seed)

  def random(self) -> int:
    raise NotImplementedError()


class OneThroughTen(RandomSource):
  def random(self) -> int:
    return self.rng.randint(1, 10)


class OneThroughOneHundred(RandomSource):
  def random(self) -> int:
    return self.rng.randint(1, 100)


__all__ = ["RandomSource", "OneThroughTen", "OneThroughOneHundred"]
