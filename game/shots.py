# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Shot resolution against a board and its fleet.
"""

import dataclasses
from dataclasses import dataclass
from typing import List, Optional

from game.board import Board, Cell, CellState, Coordinate, Ship, copy_board, in_bounds


@dataclass
class ShotOutcome:
    """Result of resolving one shot."""
    board: Board
    ships: List[Ship]
    hit: bool
    sunk_ship: Optional[Ship] = None


def process_shot(board: Board, ships: List[Ship], coordinate: Coordinate) -> ShotOutcome:
    """
    Resolve a shot at coordinate.

    The board and ships passed in are left untouched; the outcome carries
    fresh copies. Shooting a cell that is already HIT or MISS changes
    nothing and reports a miss, so a hit is never counted twice.

    Args:
        board: Board being fired upon
        ships: Fleet placed on that board
        coordinate: Target (row, col)

    Returns:
        ShotOutcome with the updated board and fleet.
    """
    new_board = copy_board(board)
    new_ships = [dataclasses.replace(ship) for ship in ships]
    row, col = coordinate
    cell = new_board[row][col]

    if cell.state is CellState.SHIP and cell.ship_id is not None:
        new_board[row][col] = Cell(CellState.HIT, cell.ship_id)
        ship = next(s for s in new_ships if s.id == cell.ship_id)
        ship.hits = min(ship.hits + 1, ship.size)

        sunk_ship = None
        if ship.hits == ship.size:
            ship.sunk = True
            sunk_ship = ship
        return ShotOutcome(new_board, new_ships, True, sunk_ship)

    if cell.state is CellState.EMPTY:
        new_board[row][col] = Cell(CellState.MISS)

    return ShotOutcome(new_board, new_ships, False)


def check_game_over(ships: List[Ship]) -> bool:
    """Check if every ship of a fleet is sunk (true for an empty fleet)."""
    return all(ship.sunk for ship in ships)


def is_open_cell(board: Board, coordinate: Coordinate) -> bool:
    """A cell is a legal target while it is on the board and not yet shot."""
    row, col = coordinate
    return in_bounds(row, col) and board[row][col].state in (CellState.EMPTY, CellState.SHIP)


def live_hits(board: Board, ships: List[Ship]) -> List[Coordinate]:
    """Hit cells whose ship is still afloat, in row-major order."""
    afloat = {ship.id for ship in ships if not ship.sunk}
    return [
        (row, col)
        for row, cells in enumerate(board)
        for col, cell in enumerate(cells)
        if cell.state is CellState.HIT and cell.ship_id in afloat
    ]
