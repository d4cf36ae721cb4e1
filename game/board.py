# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Board model and ship placement.

Provides:
- Cell and board representation (10x10 grid of cells)
- Ship and fleet data types
- Placement validation with the one-cell buffer rule
- Random fleet placement
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

BOARD_SIZE = 10
SHIP_SIZES = [5, 4, 3, 3, 2]
MAX_PLACEMENT_ATTEMPTS = 1000

Coordinate = Tuple[int, int]

# All 8 surrounding cells (including diagonals)
NEIGHBOR_OFFSETS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
]


class PlacementError(RuntimeError):
    """Raised when a fleet cannot be placed within the attempt budget."""


class CellState(Enum):
    """State of a cell on the board."""
    EMPTY = "_"
    SHIP = "S"
    HIT = "X"
    MISS = "O"


class Orientation(Enum):
    """Direction a ship extends from its origin."""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def toggled(self) -> "Orientation":
        if self is Orientation.HORIZONTAL:
            return Orientation.VERTICAL
        return Orientation.HORIZONTAL


@dataclass(frozen=True)
class Cell:
    """A single board cell. Frozen so boards can be copied row by row."""
    state: CellState = CellState.EMPTY
    ship_id: Optional[int] = None


Board = List[List[Cell]]


def ship_class_name(size: int, ship_id: Optional[int] = None) -> str:
    """Name the vessel class for a ship of the standard fleet."""
    if size == 5:
        return "Aircraft Carrier"
    if size == 4:
        return "Battleship"
    if size == 3:
        # The two 3-cell ships are told apart by fleet index
        return "Cruiser" if ship_id == 2 else "Submarine"
    if size == 2:
        return "Destroyer"
    return "Ship"


@dataclass
class Ship:
    """Represents a placed ship. Only hits and sunk change after placement."""
    id: int
    size: int
    positions: Tuple[Coordinate, ...] = ()
    hits: int = 0
    sunk: bool = False

    @property
    def name(self) -> str:
        return ship_class_name(self.size, self.id)


def create_empty_board() -> Board:
    """Create a 10x10 board of empty cells."""
    return [[Cell() for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]


def copy_board(board: Board) -> Board:
    """Copy the grid; cells are immutable so copying the rows is enough."""
    return [list(row) for row in board]


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def ship_cells(origin: Coordinate, size: int, orientation: Orientation) -> List[Coordinate]:
    """Enumerate the cells of a run starting at origin."""
    row, col = origin
    if orientation is Orientation.HORIZONTAL:
        return [(row, col + i) for i in range(size)]
    return [(row + i, col) for i in range(size)]


def has_adjacent_ship(board: Board, row: int, col: int) -> bool:
    """Check whether any of the 8 surrounding cells holds a ship."""
    for d_row, d_col in NEIGHBOR_OFFSETS:
        r, c = row + d_row, col + d_col
        if in_bounds(r, c) and board[r][c].state is CellState.SHIP:
            return True
    return False


def can_place_ship(
    board: Board,
    origin: Coordinate,
    size: int,
    orientation: Orientation,
) -> bool:
    """
    Check whether a ship fits at origin.

    A placement is refused when any cell of the run is off the board,
    already occupied, or touches another ship (diagonals included).

    Args:
        board: Board to check against
        origin: Top/left cell of the run
        size: Ship length
        orientation: Direction of the run

    Returns:
        True if the ship can be placed.
    """
    for row, col in ship_cells(origin, size, orientation):
        if not in_bounds(row, col):
            return False
        if board[row][col].state is CellState.SHIP:
            return False
        if has_adjacent_ship(board, row, col):
            return False
    return True


def place_ship(
    board: Board,
    origin: Coordinate,
    size: int,
    orientation: Orientation,
    ship_id: int,
) -> Tuple[Board, List[Coordinate]]:
    """
    Mark a run of cells as occupied by ship_id.

    Does not validate; call can_place_ship first.

    Returns:
        Tuple of (new board, ordered list of occupied coordinates).
    """
    new_board = copy_board(board)
    positions = ship_cells(origin, size, orientation)
    for row, col in positions:
        new_board[row][col] = Cell(CellState.SHIP, ship_id)
    return new_board, positions


def clamp_origin(origin: Coordinate, size: int, orientation: Orientation) -> Coordinate:
    """Shift origin so a run past the right or bottom edge ends exactly at it."""
    row, col = origin
    if orientation is Orientation.HORIZONTAL and col + size > BOARD_SIZE:
        col = BOARD_SIZE - size
    elif orientation is Orientation.VERTICAL and row + size > BOARD_SIZE:
        row = BOARD_SIZE - size
    return (row, col)


def place_ships_randomly(
    ship_sizes: List[int],
    rng: Optional[random.Random] = None,
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
) -> Tuple[Board, List[Ship]]:
    """
    Place a fleet at random positions honouring the buffer rule.

    Args:
        ship_sizes: Ship lengths in fleet order; ids are list indices
        rng: Random source (a fresh unseeded one if None)
        max_attempts: Attempts allowed per ship

    Returns:
        Tuple of (board, ships).

    Raises:
        PlacementError: If a ship could not be placed in max_attempts tries.
    """
    rng = rng or random.Random()
    board = create_empty_board()
    ships: List[Ship] = []

    for index, size in enumerate(ship_sizes):
        placed = False
        attempts = 0

        while not placed and attempts < max_attempts:
            attempts += 1
            origin = (rng.randrange(BOARD_SIZE), rng.randrange(BOARD_SIZE))
            orientation = rng.choice([Orientation.HORIZONTAL, Orientation.VERTICAL])

            if can_place_ship(board, origin, size, orientation):
                board, positions = place_ship(board, origin, size, orientation, index)
                ships.append(Ship(id=index, size=size, positions=tuple(positions)))
                placed = True

        if not placed:
            raise PlacementError(
                f"Failed to place ship {index} (size {size}) after {max_attempts} attempts"
            )
        logger.debug(f"Placed ship {index} (size {size}) after {attempts} attempts")

    return board, ships
