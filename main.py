"""Small runner that plays one game of Knock Out! on the console.

Builds a game, attaches a `DiceGameTracker` so every roll is reported, and
prints a summary once the game is over.
"""

import argparse
import logging

from knockout import DiceGameTracker, GameConfig, KnockOut


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
  parser = argparse.ArgumentParser(description="Play a game of Knock Out!")
  parser.add_argument("-n", "--num-players", type=int, default=None, help="Number of players (default: from config)")
  parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible game")
  parser.add_argument("--config", type=str, default=None, help="Path to a YAML config file")
  parser.add_argument("--source", type=str, default=None, help="Random source class name, e.g. OneThroughOneHundred")
  parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
  return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> KnockOut:
  args = parse_args(argv)
  logging.basicConfig(
    level=logging.DEBUG if args.verbose else logging.INFO,
    format="%(levelname)s %(name)s: %(message)s",
  )

  config = GameConfig.load(args.config)
  if args.source is not None:
    config = GameConfig.deserialize({**config.serialize(), "source": args.source})

  game = KnockOut(args.num_players, config=config, seed=args.seed, observer=DiceGameTracker())
  game.play()
  game.print_summary()
  return game


if __name__ == "__main__":
  main()
