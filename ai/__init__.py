# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Computer opponent for Battleship.

Provides the hunt/target strategy with parity hunting, direction reversal
and multi-wound follow-up.
"""

from ai.hunt_target import HuntState, HuntTargetAgent, TargetState

__all__ = [
    'HuntState',
    'HuntTargetAgent',
    'TargetState',
]
