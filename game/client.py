#!/usr/bin/env python3
# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Interactive Battleship client.

Place your fleet, then trade shots with the computer in the terminal.
"""

import argparse
import logging
import time

from game.battleship_game import BattleshipGame, GamePhase, Side
from game.board import Orientation
from game.config import load_config


logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def print_help():
    """Print help message."""
    print("""
Setup Commands:
  <coordinate> [h|v]  - Place the next ship (e.g., A1, C3 v)
  rotate              - Toggle orientation for the next ship
  random              - Place the whole fleet at random
  start               - Start the battle once all ships are placed

Battle Commands:
  <coordinate>        - Fire at coordinate (e.g., A5, B10, J1)
  board               - Show both boards
  status              - Show game status
  again               - Start a new game after game over
  help                - Show this help
  quit                - Exit game

Coordinate format: Letter (A-J) + Number (1-10)
Ships need a 1-cell gap between them, diagonals included.
""")


def print_boards(game: BattleshipGame, reveal_enemy: bool = False):
    """Print the player's fleet and the enemy waters."""
    print("\n  YOUR FLEET")
    print(game.get_board_string(Side.PLAYER))
    if game.phase is not GamePhase.SETUP:
        print(f"\n  {game.enemy_name.upper()}")
        print(game.get_board_string(Side.COMPUTER, reveal=reveal_enemy))
    print()


def print_status(game: BattleshipGame):
    """Print game statistics."""
    status = game.get_game_status()
    print(f"\n--- Game Status ({status['phase']}) ---")
    for side, label in (("player", "Your fleet"), ("computer", f"{game.enemy_name}'s fleet")):
        fleet = status[side]
        print(f"{label}: {fleet['ships_remaining']}/{fleet['total_ships']} afloat, "
              f"sunk: {fleet['sunk_ships'] or 'None'}")
    mine = status["computer"]
    print(f"Your shots: {mine['shots_fired']} (hits {mine['hits']}, misses {mine['misses']})")
    print()


def handle_setup(game: BattleshipGame, user_input: str):
    """Process one setup command."""
    cmd = user_input.lower()

    if cmd == "rotate":
        game.toggle_orientation()
    elif cmd == "random":
        game.place_player_ships_randomly()
    elif cmd == "start":
        if not game.start_game():
            print("\nPlace all your ships first.")
            return
    else:
        parts = user_input.split()
        orientation = None
        if len(parts) == 2 and parts[1].lower() in ("h", "v"):
            orientation = Orientation.HORIZONTAL if parts[1].lower() == "h" else Orientation.VERTICAL
        elif len(parts) != 1:
            print("\nUsage: <coordinate> [h|v]")
            return
        try:
            origin = game.parse_coordinate(parts[0])
        except ValueError as e:
            print(f"\n{e}")
            return
        game.place_player_ship(origin, orientation)

    print(f"\n{game.message}")
    print_boards(game)


def handle_shot(game: BattleshipGame, user_input: str, ai_delay: float, reveal_enemy: bool):
    """Fire at the enemy and let the computer reply."""
    result = game.player_fire(user_input)
    print(f"\n{result['message']}")
    if not result["valid"]:
        return

    if result["sunk"]:
        print(f"*** ENEMY {result['sunk'].name.upper()} DESTROYED! ***")

    if game.phase is GamePhase.PLAYING:
        print(f"{game.enemy_name} is aiming...")
        time.sleep(ai_delay)
        reply = game.computer_turn()
        print(reply["message"])
        if reply["sunk"]:
            print(f"*** YOUR {reply['sunk'].name.upper()} WAS DESTROYED! ***")

    print_boards(game, reveal_enemy)


def main():
    """Run interactive Battleship game."""
    parser = argparse.ArgumentParser(description="Play Battleship against the computer")
    parser.add_argument('--config', type=str, default=None, help='Path to configuration file')
    parser.add_argument('--seed', type=int, default=None, help='Random seed (overrides config)')
    args = parser.parse_args()

    config = load_config(args.config)
    logging.getLogger().setLevel(config['logging']['level'])
    ai_delay = config['client']['ai_delay']
    reveal_enemy = config['client']['reveal_enemy']

    print("=" * 50)
    print("       BATTLESHIP")
    print("=" * 50)
    print("\nSink all 5 enemy ships before yours go down!")
    print("Ships: Aircraft Carrier(5), Battleship(4), Cruiser(3),")
    print("       Submarine(3), Destroyer(2)")
    print("\nType 'help' for commands.\n")

    game = BattleshipGame(seed=args.seed, config=config)
    print(f"Your opponent: {game.enemy_name}")
    print(game.message)
    print_boards(game)

    while True:
        try:
            user_input = input("> ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            break

        if not user_input:
            continue

        cmd = user_input.lower()

        if cmd in ("quit", "exit", "q"):
            print("Thanks for playing!")
            break

        if cmd == "help":
            print_help()
            continue

        if cmd == "board":
            print_boards(game, reveal_enemy)
            continue

        if cmd == "status":
            print_status(game)
            continue

        if cmd == "again":
            if game.phase is GamePhase.GAME_OVER:
                game.reset()
                print(f"\nNew game! Your opponent: {game.enemy_name}")
                print(game.message)
                print_boards(game)
            continue

        if game.phase is GamePhase.SETUP:
            handle_setup(game, user_input)
        elif game.phase is GamePhase.PLAYING:
            handle_shot(game, user_input, ai_delay, reveal_enemy)
        else:
            print("\nThe game is over. Type 'again' to play another or 'quit' to exit.")
            continue

        if game.phase is GamePhase.GAME_OVER:
            print("=" * 50)
            if game.winner is Side.PLAYER:
                print("  VICTORY! All enemy ships destroyed!")
            else:
                print(f"  DEFEAT! {game.enemy_name} sank your fleet.")
            print("=" * 50)
            print_status(game)
            print_boards(game, reveal_enemy=True)
            print("Type 'again' to play another game or 'quit' to exit.")


if __name__ == "__main__":
    main()
