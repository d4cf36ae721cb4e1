# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Evaluation framework for the hunt/target opponent.

Plays the agent against seeded random fleets and reports how many shots
it needs to clear a board.
"""

import argparse
import json
import logging
import random
import time
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from ai.hunt_target import HuntTargetAgent
from game.board import SHIP_SIZES, place_ships_randomly
from game.config import load_config, validate_config


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class Evaluator:
    """Evaluator for hunt/target agent performance analysis."""

    def __init__(
        self,
        agent: HuntTargetAgent,
        num_games: int = 100,
        seeds: Optional[List[int]] = None,
        max_steps: int = 100,
        ship_sizes: Optional[List[int]] = None,
    ):
        """
        Initialize evaluator.

        Args:
            agent: Agent to evaluate
            num_games: Number of games to evaluate
            seeds: Random seeds for fleet placement
            max_steps: Maximum shots per game
            ship_sizes: Fleet composition
        """
        if num_games < 1:
            raise ValueError(f"num_games must be at least 1, got {num_games}")
        self.agent = agent
        self.num_games = num_games
        self.seeds = seeds if seeds else list(range(42, 42 + num_games))
        self.max_steps = max_steps
        self.ship_sizes = ship_sizes or SHIP_SIZES

    def evaluate_agent(self, verbose: bool = False) -> Dict:
        """
        Evaluate agent on seeded games.

        Args:
            verbose: Log per-game results

        Returns:
            Evaluation statistics dictionary
        """
        logger.info(f"Evaluating hunt/target agent on {self.num_games} games...")
        start_time = time.time()

        results = []
        game_logs = []

        for i, seed in enumerate(self.seeds[:self.num_games]):
            board, ships = place_ships_randomly(self.ship_sizes, random.Random(seed))

            stats = self.agent.play_episode(
                board=board,
                ships=ships,
                max_steps=self.max_steps,
            )

            results.append(stats)
            game_logs.append({
                'game_id': i + 1,
                'seed': seed,
                'won': stats['won'],
                'moves': stats['moves'],
                'ships_sunk': stats['ships_sunk'],
                'accuracy': stats['accuracy'],
            })

            if verbose:
                status = "WON" if stats['won'] else "INCOMPLETE"
                logger.info(
                    f"Game {i+1}/{self.num_games} (seed={seed}): {status} | "
                    f"Moves: {stats['moves']} | Ships: {stats['ships_sunk']}/{len(ships)} | "
                    f"Accuracy: {stats['accuracy']:.2%}"
                )

        elapsed_time = time.time() - start_time
        num_played = len(results)

        wins = [r['won'] for r in results]
        moves = [r['moves'] for r in results]
        winning_moves = [r['moves'] for r in results if r['won']]
        accuracies = [r['accuracy'] for r in results]
        ships_sunk = [r['ships_sunk'] for r in results]

        eval_stats = {
            'num_games': num_played,
            'wins': int(sum(wins)),
            'win_rate': float(np.mean(wins)),
            'avg_moves': float(np.mean(moves)),
            'std_moves': float(np.std(moves)),
            'min_moves': int(np.min(moves)),
            'max_moves': int(np.max(moves)),
            'avg_winning_moves': float(np.mean(winning_moves)) if winning_moves else None,
            'avg_accuracy': float(np.mean(accuracies)),
            'std_accuracy': float(np.std(accuracies)),
            'avg_ships_sunk': float(np.mean(ships_sunk)),
            'total_time': elapsed_time,
            'avg_time_per_game': elapsed_time / num_played,
            'repeated_shots': int(sum(r['repeated_shots'] for r in results)),
            'parity_violations': int(sum(r['parity_violations'] for r in results)),
            'game_logs': game_logs,
        }

        return eval_stats

    def print_summary(self, results: Dict):
        """Print formatted evaluation summary."""
        print("\n" + "="*60)
        print("HUNT/TARGET AGENT EVALUATION RESULTS")
        print("="*60)
        print(f"Games Played:        {results['num_games']}")
        print(f"Wins:                {results['wins']}")
        print(f"Win Rate:            {results['win_rate']:.2%}")
        print(f"Avg Moves:           {results['avg_moves']:.1f} ± {results['std_moves']:.1f}")
        print(f"Min / Max Moves:     {results['min_moves']} / {results['max_moves']}")
        if results['avg_winning_moves']:
            print(f"Avg Winning Moves:   {results['avg_winning_moves']:.1f}")
        print(f"Avg Accuracy:        {results['avg_accuracy']:.2%}")
        print(f"Avg Ships Sunk:      {results['avg_ships_sunk']:.1f}/{len(self.ship_sizes)}")
        print(f"Repeated Shots:      {results['repeated_shots']}")
        print(f"Parity Violations:   {results['parity_violations']}")
        print(f"Total Time:          {results['total_time']:.1f}s")
        print(f"Avg Time per Game:   {results['avg_time_per_game']:.3f}s")
        print("="*60)


def main():
    """Main evaluation entry point."""
    parser = argparse.ArgumentParser(description="Evaluate the hunt/target Battleship agent")
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration file'
    )
    parser.add_argument(
        '--num-games',
        type=int,
        default=None,
        help='Number of games to evaluate (overrides config)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Seed for the agent\'s hunt choices'
    )
    parser.add_argument(
        '--output',
        type=str,
        default='eval_results',
        help='Output directory for results'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print per-game results'
    )

    args = parser.parse_args()

    config = load_config(args.config)
    logging.getLogger().setLevel(config['logging']['level'])
    eval_config = config['evaluation']
    if args.num_games is not None:
        eval_config['num_games'] = args.num_games
    try:
        validate_config(config)
    except ValueError as e:
        parser.error(str(e))
    num_games = eval_config['num_games']

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    agent = HuntTargetAgent(seed=args.seed)
    evaluator = Evaluator(
        agent,
        num_games=num_games,
        seeds=eval_config.get('seeds'),
        max_steps=eval_config['max_steps'],
        ship_sizes=config['game']['ship_sizes'],
    )

    results = evaluator.evaluate_agent(verbose=args.verbose)

    results_path = output_dir / "evaluation_results.json"
    with open(results_path, 'w') as f:
        json.dump(results, f, indent=2)

    evaluator.print_summary(results)
    logger.info(f"Results saved to {results_path}")


if __name__ == "__main__":
    main()
