# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Configuration loading.

Settings live in a YAML file (see configs/game_config.yaml). Values found
in the file override the defaults below section by section.
"""

import copy
from pathlib import Path
from typing import Dict, Optional

import yaml

from game.board import MAX_PLACEMENT_ATTEMPTS, SHIP_SIZES

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "configs" / "game_config.yaml"

DEFAULT_CONFIG: Dict = {
    'game': {
        'ship_sizes': list(SHIP_SIZES),
        'seed': None,
        'max_placement_attempts': MAX_PLACEMENT_ATTEMPTS,
    },
    'client': {
        'ai_delay': 1.0,
        'reveal_enemy': False,
    },
    'evaluation': {
        'num_games': 100,
        'seeds': None,
        'max_steps': 100,
    },
    'logging': {
        'level': 'INFO',
    },
}


def _merge(base: Dict, override: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        elif key in merged:
            merged[key] = value
    return merged


def validate_config(config: Dict) -> None:
    """Raise ValueError for settings the game cannot run with."""
    sizes = config['game']['ship_sizes']
    if not sizes or any(not isinstance(size, int) or not 2 <= size <= 5 for size in sizes):
        raise ValueError(f"Invalid ship_sizes {sizes}: each size must be an integer from 2 to 5")
    if config['game']['max_placement_attempts'] < 1:
        raise ValueError("max_placement_attempts must be at least 1")
    if config['evaluation']['num_games'] < 1:
        raise ValueError("evaluation.num_games must be at least 1")
    if config['client']['ai_delay'] < 0:
        raise ValueError("client.ai_delay cannot be negative")


def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to a YAML file; the bundled default when None

    Returns:
        Configuration dict with every section present.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist.
        ValueError: If a setting is out of range.
    """
    if config_path is None:
        path = DEFAULT_CONFIG_PATH
        if not path.exists():
            return copy.deepcopy(DEFAULT_CONFIG)
    else:
        path = Path(config_path)

    with open(path, 'r') as f:
        loaded = yaml.safe_load(f) or {}

    config = _merge(DEFAULT_CONFIG, loaded)
    validate_config(config)
    return config
