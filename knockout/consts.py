from dataclasses import asdict
from pathlib import Path
from pydantic.dataclasses import dataclass as pydantic_dataclass

DEFAULT_PLAYERS = 5
DEFAULT_DICE_SIDES = 6
# fixed rules of the game
WINNING_SCORE = 100
KNOCK_OUT_NUMBERS = (6, 7, 8, 9)
DEFAULT_SOURCE = "OneThroughTen"

DEFAULT_CONFIG_PATH = Path(__file__).parent / "assets" / "config.yaml"


@pydantic_dataclass(frozen=True)
class GameConfig:
  """Validated immutable configuration for a game of Knock Out!.

  Uses pydantic's dataclass wrapper for type validation; the domain rules
  are checked in `__post_init__`.
  """
  num_players: int = DEFAULT_PLAYERS
  dice_sides: int = DEFAULT_DICE_SIDES
  source: str = DEFAULT_SOURCE
  # None means no cap on the number of turns
  max_turns: int | None = None

  def __post_init__(self):
    if self.num_players <= 0:
      raise ValueError(f'num_players must be positive, got {self.num_players}')
    if self.dice_sides <= 0:
      raise ValueError(f'dice_sides must be positive, got {self.dice_sides}')
    if self.max_turns is not None and self.max_turns <= 0:
      raise ValueError(f'max_turns must be positive, got {self.max_turns}')

  def serialize(self) -> dict:
    return asdict(self)

  @classmethod
  def deserialize(cls, data: dict) -> 'GameConfig':
    return cls(**data)

  @classmethod
  def load(cls, path: str | Path | None = None) -> 'GameConfig':
    """Load a config from a YAML file.

    The file holds a top-level `game` mapping whose keys match the fields
    of this class; missing keys keep their defaults.
    """
    import yaml
    p = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    with p.open('r', encoding='utf8') as fh:
      j = yaml.safe_load(fh) or {}
    if not isinstance(j, dict):
      raise ValueError(f"Config file {p} must hold a mapping, got {type(j).__name__}")
    data = j.get('game') or {}
    if not isinstance(data, dict):
      raise ValueError(f"'game' in config file {p} must be a mapping, got {type(data).__name__}")
    return cls(**data)


GAME_CONFIG_DEFAULT = GameConfig()
