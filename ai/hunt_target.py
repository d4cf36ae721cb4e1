# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Hunt/target opponent for Battleship.

The opponent alternates between two modes:
- Hunt: no known wounded ship; fire at random even-parity cells
  (row + col even) until those run out, then at any open cell.
- Target: finish off a wounded ship. Neighbours of the first hit are
  probed in order; once two adjacent hits fix the orientation the queue
  only holds the two open ends of the hit line, and a miss off one end
  re-anchors the search on the opposite end.

When a ship sinks while other ships still show hits, the belief state is
rebuilt from those remaining wounds instead of dropping back to Hunt.

Belief states are immutable values; every transition returns a new one.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from game.board import (
    BOARD_SIZE,
    SHIP_SIZES,
    Board,
    CellState,
    Coordinate,
    Orientation,
    Ship,
    in_bounds,
    place_ships_randomly,
)
from game.shots import check_game_over, is_open_cell, live_hits, process_shot

logger = logging.getLogger(__name__)

# Returned when no open cell is left on the board
SENTINEL_MOVE: Coordinate = (0, 0)

# Up, down, left, right
ORTHOGONAL_OFFSETS = [(-1, 0), (1, 0), (0, -1), (0, 1)]


class AIMode(Enum):
    """Opponent search mode."""
    HUNT = "hunt"
    TARGET = "target"


@dataclass(frozen=True)
class HuntState:
    """No wounded ship known; scanning for first contact."""

    @property
    def mode(self) -> AIMode:
        return AIMode.HUNT


@dataclass(frozen=True)
class TargetState:
    """
    Pursuing a wounded ship.

    Attributes:
        queue: Cells to probe, front first
        streak: Hits believed to belong to the ship being pursued
        last_hit: Most recent confirmed hit
        orientation: Axis of the streak once two adjacent hits are known
    """
    queue: Tuple[Coordinate, ...]
    streak: Tuple[Coordinate, ...]
    last_hit: Coordinate
    orientation: Optional[Orientation] = None

    @property
    def mode(self) -> AIMode:
        return AIMode.TARGET


AIState = Union[HuntState, TargetState]


def _dedup(cells) -> Tuple[Coordinate, ...]:
    seen = set()
    unique = []
    for cell in cells:
        if cell not in seen:
            seen.add(cell)
            unique.append(cell)
    return tuple(unique)


def _open_neighbors(board: Board, coordinate: Coordinate) -> List[Coordinate]:
    row, col = coordinate
    neighbors = [(row + d_row, col + d_col) for d_row, d_col in ORTHOGONAL_OFFSETS]
    return [cell for cell in neighbors if is_open_cell(board, cell)]


def _is_hit(board: Board, row: int, col: int) -> bool:
    return in_bounds(row, col) and board[row][col].state is CellState.HIT


def _hit_axis(board: Board, coordinate: Coordinate) -> Optional[Orientation]:
    """
    Orientation implied by a hit orthogonally next to coordinate.

    Ships never touch, so an adjacent hit always belongs to the same ship.
    """
    row, col = coordinate
    if _is_hit(board, row, col - 1) or _is_hit(board, row, col + 1):
        return Orientation.HORIZONTAL
    if _is_hit(board, row - 1, col) or _is_hit(board, row + 1, col):
        return Orientation.VERTICAL
    return None


def _hit_run(board: Board, anchor: Coordinate, orientation: Orientation) -> List[Coordinate]:
    """Contiguous hit cells through anchor along orientation, sorted."""
    d_row, d_col = (0, 1) if orientation is Orientation.HORIZONTAL else (1, 0)
    run = [anchor]
    for step in (-1, 1):
        row, col = anchor
        while True:
            row, col = row + d_row * step, col + d_col * step
            if not _is_hit(board, row, col):
                break
            run.append((row, col))
    return sorted(run)


def _line_ends(streak, orientation: Orientation) -> Tuple[Coordinate, Coordinate]:
    """Cells just beyond the low and high extremities of a line (may be off-board)."""
    if orientation is Orientation.HORIZONTAL:
        row = streak[0][0]
        cols = [col for _, col in streak]
        return (row, min(cols) - 1), (row, max(cols) + 1)
    col = streak[0][1]
    rows = [row for row, _ in streak]
    return (min(rows) - 1, col), (max(rows) + 1, col)


def _line_queue(
    board: Board,
    streak,
    orientation: Orientation,
    latest: Coordinate,
) -> Tuple[Coordinate, ...]:
    """Open ends of a hit line, the end the latest hit extended first."""
    low_end, high_end = _line_ends(streak, orientation)
    axis = 1 if orientation is Orientation.HORIZONTAL else 0
    if latest[axis] == max(cell[axis] for cell in streak):
        ordered = (high_end, low_end)
    else:
        ordered = (low_end, high_end)
    return _dedup(cell for cell in ordered if is_open_cell(board, cell))


def _reversal_end(state: TargetState, miss: Coordinate) -> Optional[Coordinate]:
    """
    End to re-anchor on after a miss past one extremity of the line.

    Returns None when the miss was not on the line beyond either end.
    """
    low_end, high_end = _line_ends(state.streak, state.orientation)
    if state.orientation is Orientation.HORIZONTAL:
        if miss[0] != low_end[0]:
            return None
        axis = 1
    else:
        if miss[1] != low_end[1]:
            return None
        axis = 0

    if miss[axis] >= high_end[axis]:
        return low_end
    if miss[axis] <= low_end[axis]:
        return high_end
    return None


def _parity_cells(board: Board) -> List[Coordinate]:
    return [
        (row, col)
        for row in range(BOARD_SIZE)
        for col in range(BOARD_SIZE)
        if (row + col) % 2 == 0 and is_open_cell(board, (row, col))
    ]


def _open_cells(board: Board) -> List[Coordinate]:
    return [
        (row, col)
        for row in range(BOARD_SIZE)
        for col in range(BOARD_SIZE)
        if is_open_cell(board, (row, col))
    ]


def hunt_move(board: Board, rng: random.Random) -> Coordinate:
    """Random open even-parity cell, else any open cell, else the sentinel."""
    candidates = _parity_cells(board) or _open_cells(board)
    if not candidates:
        return SENTINEL_MOVE
    return rng.choice(candidates)


def next_move(board: Board, state: AIState, rng: random.Random) -> Tuple[Coordinate, AIState]:
    """
    Choose the opponent's next shot.

    In Target mode the first queued cell that is still open is taken;
    stale entries in front of it are dropped. If the queue runs dry the
    state falls back to Hunt and a hunt cell is chosen this same turn.

    Args:
        board: Opponent's view target (the human's board)
        state: Current belief state
        rng: Random source for hunt choices

    Returns:
        Tuple of (coordinate, new belief state).
    """
    logger.debug(
        f"AI state: mode={state.mode.value} "
        f"queue={len(getattr(state, 'queue', ()))} "
        f"streak={len(getattr(state, 'streak', ()))} "
        f"orientation={getattr(state, 'orientation', None)}"
    )

    if isinstance(state, TargetState):
        queue = list(state.queue)
        while queue:
            target = queue.pop(0)
            if is_open_cell(board, target):
                logger.debug(f"AI targeting queued cell {target}")
                return target, TargetState(
                    queue=tuple(queue),
                    streak=state.streak,
                    last_hit=state.last_hit,
                    orientation=state.orientation,
                )
        logger.debug("Target queue exhausted, back to hunting")
        state = HuntState()

    return hunt_move(board, rng), state


def update_after_shot(
    state: AIState,
    coordinate: Coordinate,
    hit: bool,
    board: Board,
) -> AIState:
    """
    Fold the outcome of a shot into the belief state.

    Args:
        state: Belief state returned by next_move for this shot
        coordinate: Cell that was fired at
        hit: Whether it hit a ship
        board: Board after the shot was resolved

    Returns:
        New belief state.
    """
    if not hit:
        if isinstance(state, HuntState) or state.orientation is None:
            return state

        queue = [cell for cell in state.queue if is_open_cell(board, cell)]
        reverse = _reversal_end(state, coordinate)
        if reverse is not None and is_open_cell(board, reverse):
            logger.debug(f"Miss at {coordinate}, reversing to {reverse}")
            queue.append(reverse)
        return TargetState(
            queue=_dedup(queue),
            streak=state.streak,
            last_hit=state.last_hit,
            orientation=state.orientation,
        )

    if isinstance(state, HuntState):
        logger.debug(f"AI got a hit at {coordinate}")
        return TargetState(
            queue=tuple(_open_neighbors(board, coordinate)),
            streak=(coordinate,),
            last_hit=coordinate,
        )

    orientation = _hit_axis(board, coordinate)
    if orientation is None:
        # Not touching any earlier hit: probe around it after what is queued
        return TargetState(
            queue=_dedup(list(state.queue) + _open_neighbors(board, coordinate)),
            streak=state.streak + (coordinate,),
            last_hit=coordinate,
        )

    run = _hit_run(board, coordinate, orientation)
    streak = tuple(cell for cell in state.streak if cell in run)
    streak += tuple(cell for cell in run if cell not in streak)
    return TargetState(
        queue=_line_queue(board, streak, orientation, coordinate),
        streak=streak,
        last_hit=coordinate,
        orientation=orientation,
    )


def _wounds(hits: List[Coordinate]) -> List[List[Coordinate]]:
    """Group hits into orthogonally connected clusters, one per ship."""
    remaining = set(hits)
    clusters = []
    for start in hits:
        if start not in remaining:
            continue
        remaining.discard(start)
        cluster = [start]
        frontier = [start]
        while frontier:
            row, col = frontier.pop()
            for d_row, d_col in ORTHOGONAL_OFFSETS:
                cell = (row + d_row, col + d_col)
                if cell in remaining:
                    remaining.discard(cell)
                    cluster.append(cell)
                    frontier.append(cell)
        clusters.append(sorted(cluster))
    return clusters


def _wound_axis(wound: List[Coordinate]) -> Optional[Orientation]:
    if len(wound) < 2:
        return None
    if len({row for row, _ in wound}) == 1:
        return Orientation.HORIZONTAL
    if len({col for _, col in wound}) == 1:
        return Orientation.VERTICAL
    return None


def _wound_probes(board: Board, wound: List[Coordinate]) -> List[Coordinate]:
    """Line ends for a straight wound, otherwise every open neighbour."""
    orientation = _wound_axis(wound)
    if orientation is not None:
        low_end, high_end = _line_ends(wound, orientation)
        return [cell for cell in (low_end, high_end) if is_open_cell(board, cell)]
    probes = []
    for hit in wound:
        probes.extend(_open_neighbors(board, hit))
    return probes


def resume_after_sink(board: Board, ships: List[Ship]) -> AIState:
    """
    Rebuild the belief state after a ship was sunk.

    Scans the board for hits on ships still afloat:
    - none: full reset to Hunt
    - one wound: target it afresh (a straight run keeps its orientation
      and only its two open ends are queued)
    - several wounds: stay in Target with the union of every wound's
      probes, deduplicated

    Args:
        board: Board after the sinking shot
        ships: Fleet after the sinking shot

    Returns:
        New belief state.
    """
    hits = live_hits(board, ships)
    if not hits:
        return HuntState()

    wounds = _wounds(hits)
    logger.info(f"Ship sunk with {len(hits)} live hit(s) in {len(wounds)} wound(s) remaining")

    if len(wounds) == 1:
        wound = wounds[0]
        return TargetState(
            queue=_dedup(_wound_probes(board, wound)),
            streak=tuple(wound),
            last_hit=wound[0],
            orientation=_wound_axis(wound),
        )

    queue = []
    for wound in wounds:
        queue.extend(_wound_probes(board, wound))
    return TargetState(
        queue=_dedup(queue),
        streak=tuple(hits),
        last_hit=hits[0],
    )


class HuntTargetAgent:
    """Stateful wrapper holding the belief state and its random source."""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None):
        """
        Initialize agent.

        Args:
            rng: Random source shared with the caller (takes precedence)
            seed: Seed for a private random source when rng is None
        """
        self.rng = rng if rng is not None else random.Random(seed)
        self.state: AIState = HuntState()

    @property
    def mode(self) -> AIMode:
        return self.state.mode

    def reset(self):
        """Forget everything learnt about the current board."""
        self.state = HuntState()

    def select_action(self, board: Board) -> Coordinate:
        """Pick the next cell to fire at."""
        move, self.state = next_move(board, self.state, self.rng)
        return move

    def observe(self, coordinate: Coordinate, hit: bool, board: Board):
        """Update beliefs with a resolved shot (board after the shot)."""
        self.state = update_after_shot(self.state, coordinate, hit, board)

    def observe_sink(self, board: Board, ships: List[Ship]):
        """Apply the sink policy once a shot has sunk a ship."""
        self.state = resume_after_sink(board, ships)

    def play_episode(
        self,
        board: Optional[Board] = None,
        ships: Optional[List[Ship]] = None,
        max_steps: int = 100,
        verbose: bool = False,
    ) -> Dict:
        """
        Play one solo game against a fleet until it is sunk.

        Args:
            board: Board to fire at (random fleet if None)
            ships: Fleet on that board
            max_steps: Maximum shots before giving up
            verbose: Print every shot

        Returns:
            Episode statistics dict
        """
        if board is None or ships is None:
            board, ships = place_ships_randomly(SHIP_SIZES, self.rng)
        self.reset()

        moves = 0
        hits = 0
        repeated_shots = 0
        parity_violations = 0

        for step in range(max_steps):
            even_open = bool(_parity_cells(board))
            move = self.select_action(board)

            if not is_open_cell(board, move):
                repeated_shots += 1
                logger.error(f"Agent selected a cell that was already shot: {move}")
                break
            if isinstance(self.state, HuntState) and even_open and sum(move) % 2 == 1:
                parity_violations += 1

            outcome = process_shot(board, ships, move)
            board, ships = outcome.board, outcome.ships
            moves += 1
            if outcome.hit:
                hits += 1

            self.observe(move, outcome.hit, board)
            if outcome.sunk_ship is not None:
                self.observe_sink(board, ships)

            if verbose:
                result = "hit" if outcome.hit else "miss"
                sunk = f", sunk {outcome.sunk_ship.name}" if outcome.sunk_ship else ""
                print(f"Step {step + 1}: {move} -> {result}{sunk} [{self.mode.value}]")

            if check_game_over(ships):
                break

        ships_sunk = sum(1 for ship in ships if ship.sunk)
        return {
            'moves': moves,
            'won': check_game_over(ships),
            'ships_sunk': ships_sunk,
            'hits': hits,
            'misses': moves - hits,
            'accuracy': hits / moves if moves > 0 else 0,
            'repeated_shots': repeated_shots,
            'parity_violations': parity_violations,
        }
