#!/usr/bin/env python3
"""Kanban board game CLI entrypoint."""

import sys
import logging
import argparse

from kanban.lib.config import GameConfig, load_game_config, resolve_config_path
from kanban.lib.validate import ValidationError
from kanban.commands import play as cmd_play_module
from kanban.commands import simulate as cmd_simulate_module
from kanban.commands import catalog as cmd_catalog_module


def get_game_config(args) -> GameConfig:
    """Load game settings from --config, $KANBAN_CONFIG or ./kanban.env."""
    return load_game_config(resolve_config_path(args.config))


def _run(handler, args) -> int:
    try:
        config = get_game_config(args)
        return handler(args, config)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        print(f"ERROR: {e}")
        return 2


def cmd_play(args):
    return _run(cmd_play_module.cmd_play, args)


def cmd_simulate(args):
    return _run(cmd_simulate_module.cmd_simulate, args)


def cmd_catalog(args):
    return _run(cmd_catalog_module.cmd_catalog, args)


def main(argv=None):
    parser = argparse.ArgumentParser(prog='kb', description='Kanban board game')
    parser.add_argument('--config', '-c', help='Settings file (default: $KANBAN_CONFIG or ./kanban.env)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log engine decisions')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # kb play
    p_play = subparsers.add_parser('play', help='Play interactively')
    p_play.add_argument('--seed', type=int, help='Seed for effort rolls')
    p_play.set_defaults(func=cmd_play)

    # kb simulate
    p_simulate = subparsers.add_parser('simulate', help='Let the autopilot play')
    p_simulate.add_argument('--rounds', '-n', type=int, help='Rounds to play (default: until game over)')
    p_simulate.add_argument('--seed', type=int, help='Seed for effort rolls')
    p_simulate.set_defaults(func=cmd_simulate)

    # kb catalog
    p_catalog = subparsers.add_parser('catalog', help='List the story catalog')
    p_catalog.set_defaults(func=cmd_catalog)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
