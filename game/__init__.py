# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Battleship game core module.

Submodules:
- board: cells, ships and placement
- shots: shot resolution and win detection
- battleship_game: turn sequencing against the computer (BattleshipGame)
- config: YAML settings
"""
