# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Battleship game orchestration.

A human player faces a computer opponent, each with a 10x10 board:
- Setup: the player places ships one by one (or at random), the
  computer fleet is placed at random when the game starts
- Playing: the player fires, then the computer replies with the
  hunt/target strategy, until one fleet is sunk
- Game over: the winner is recorded; reset() starts a new game
"""

import copy
import logging
import random
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from ai.hunt_target import AIState, HuntTargetAgent
from game.board import (
    BOARD_SIZE,
    Board,
    CellState,
    Coordinate,
    Orientation,
    Ship,
    can_place_ship,
    clamp_origin,
    create_empty_board,
    place_ship,
    place_ships_randomly,
)
from game.config import DEFAULT_CONFIG, validate_config
from game.shots import check_game_over, process_shot

logger = logging.getLogger(__name__)

ENEMY_NAMES = ['Kraken', 'Leviathan', 'Nautilus', 'Poseidon', 'Triton']


class GamePhase(Enum):
    """Stage of a game."""
    SETUP = "setup"
    PLAYING = "playing"
    GAME_OVER = "gameover"


class Side(Enum):
    """Owner of a board, a fleet or a turn."""
    PLAYER = "player"
    COMPUTER = "computer"


class BattleshipGame:
    """
    Battleship game against a computer opponent.

    The boards are 10x10 with rows labeled A-J and columns 1-10.
    """

    BOARD_SIZE = BOARD_SIZE
    ROW_LABELS = "ABCDEFGHIJ"

    def __init__(self, seed: Optional[int] = None, config: Optional[Dict] = None):
        """
        Initialize a new Battleship game.

        Args:
            seed: Random seed for reproducible fleets and computer moves
                (falls back to game.seed from the config).
            config: Configuration dict as returned by load_config.
        """
        self.config = config if config is not None else copy.deepcopy(DEFAULT_CONFIG)
        validate_config(self.config)

        game_config = self.config['game']
        self.seed = seed if seed is not None else game_config['seed']
        self.rng = random.Random(self.seed)
        self.ship_sizes: List[int] = list(game_config['ship_sizes'])
        self.max_placement_attempts: int = game_config['max_placement_attempts']

        self.ai = HuntTargetAgent(rng=self.rng)
        self.reset()

    def reset(self) -> None:
        """Discard the current game and return to ship placement."""
        self.phase = GamePhase.SETUP
        self.player_board: Board = create_empty_board()
        self.computer_board: Board = create_empty_board()
        self.player_ships: List[Ship] = []
        self.computer_ships: List[Ship] = []
        self.current_turn = Side.PLAYER
        self.winner: Optional[Side] = None

        self.current_ship_index = 0
        self.orientation = Orientation.HORIZONTAL

        self.ai.reset()
        self.enemy_name = self.rng.choice(ENEMY_NAMES)

        # Game statistics
        self.shots_fired = {Side.PLAYER: 0, Side.COMPUTER: 0}
        self.hits = {Side.PLAYER: 0, Side.COMPUTER: 0}

        self.message = self._placement_prompt()
        logger.debug(f"New game (seed={self.seed}) against {self.enemy_name}")

    @property
    def ai_state(self) -> AIState:
        """Belief state of the computer opponent."""
        return self.ai.state

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    @property
    def all_ships_placed(self) -> bool:
        return self.current_ship_index >= len(self.ship_sizes)

    @property
    def current_ship_size(self) -> Optional[int]:
        """Size of the next ship to place, None once the fleet is complete."""
        if self.all_ships_placed:
            return None
        return self.ship_sizes[self.current_ship_index]

    def _placement_prompt(self) -> str:
        if self.all_ships_placed:
            return "All ships placed! Start the game to begin."
        return f"Place your {self.current_ship_size}-cell ship ({self.orientation.value})."

    def toggle_orientation(self) -> Orientation:
        """Switch the orientation used for the next placement."""
        if self.phase is GamePhase.SETUP:
            self.orientation = self.orientation.toggled()
            self.message = self._placement_prompt()
        return self.orientation

    def place_player_ship(
        self,
        origin: Coordinate,
        orientation: Optional[Orientation] = None,
        clamp: bool = True,
    ) -> Dict:
        """
        Place the next ship of the player's fleet.

        Args:
            origin: Top/left cell of the ship
            orientation: Direction of the ship; becomes the setup orientation
                for the following ships (current setup orientation if None)
            clamp: Shift the origin so the ship ends at the board edge
                instead of running past it

        Returns:
            Dict with keys:
                - 'valid': bool, whether the ship was placed
                - 'ship': the placed Ship, or None
                - 'message': human-readable result message
        """
        if self.phase is not GamePhase.SETUP:
            return {"valid": False, "ship": None, "message": "Ships can only be placed during setup."}
        if self.all_ships_placed:
            return {"valid": False, "ship": None, "message": "All ships are already placed."}

        orientation = orientation or self.orientation
        size = self.current_ship_size
        if clamp:
            origin = clamp_origin(origin, size, orientation)

        if not can_place_ship(self.player_board, origin, size, orientation):
            self.message = "Cannot place ship here. Ships need a 1-cell gap between them."
            return {"valid": False, "ship": None, "message": self.message}

        self.player_board, positions = place_ship(
            self.player_board, origin, size, orientation, self.current_ship_index
        )
        ship = Ship(id=self.current_ship_index, size=size, positions=tuple(positions))
        self.player_ships.append(ship)
        self.current_ship_index += 1
        self.orientation = orientation

        self.message = self._placement_prompt()
        return {"valid": True, "ship": ship, "message": self.message}

    def place_player_ships_randomly(self) -> None:
        """Place the whole player fleet at random, replacing any placed ships."""
        if self.phase is not GamePhase.SETUP:
            return
        self.player_board, self.player_ships = place_ships_randomly(
            self.ship_sizes, self.rng, self.max_placement_attempts
        )
        self.current_ship_index = len(self.ship_sizes)
        self.message = self._placement_prompt()

    def start_game(self) -> bool:
        """
        Place the computer fleet and start firing.

        Returns:
            True if the game started, False if setup is incomplete.
        """
        if self.phase is not GamePhase.SETUP or not self.all_ships_placed:
            return False

        self.computer_board, self.computer_ships = place_ships_randomly(
            self.ship_sizes, self.rng, self.max_placement_attempts
        )
        self.phase = GamePhase.PLAYING
        self.current_turn = Side.PLAYER
        self.message = "Your turn! Fire at the enemy board."
        logger.info(f"Game started against {self.enemy_name}")
        return True

    # ------------------------------------------------------------------
    # Coordinates
    # ------------------------------------------------------------------

    def parse_coordinate(self, coord: str) -> Tuple[int, int]:
        """
        Parse a coordinate string like 'A5' or 'B10' into (row, col).

        Args:
            coord: Coordinate string (e.g., 'A5', 'J10')

        Returns:
            Tuple of (row_index, col_index), both 0-based.

        Raises:
            ValueError: If coordinate is invalid.
        """
        coord = coord.strip().upper()

        if len(coord) < 2 or len(coord) > 3:
            raise ValueError(f"Invalid coordinate format: {coord}")

        row_char = coord[0]
        col_str = coord[1:]

        if row_char not in self.ROW_LABELS:
            raise ValueError(f"Invalid row '{row_char}'. Must be A-J.")

        try:
            col_num = int(col_str)
        except ValueError:
            raise ValueError(f"Invalid column '{col_str}'. Must be 1-10.")

        if not (1 <= col_num <= self.BOARD_SIZE):
            raise ValueError(f"Column {col_num} out of range. Must be 1-10.")

        return (self.ROW_LABELS.index(row_char), col_num - 1)

    def format_coordinate(self, row: int, col: int) -> str:
        """Convert (row, col) indices to coordinate string like 'A5'."""
        return f"{self.ROW_LABELS[row]}{col + 1}"

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    @staticmethod
    def _shot_result(valid: bool, result: str, coordinate, sunk: Optional[Ship], message: str) -> Dict:
        return {
            "valid": valid,
            "result": result,
            "coordinate": coordinate,
            "sunk": sunk,
            "message": message,
        }

    def player_fire(self, coord: Union[str, Coordinate]) -> Dict:
        """
        Fire at the computer's board.

        Args:
            coord: Target as a string (e.g., 'A5') or a (row, col) tuple

        Returns:
            Dict with keys:
                - 'valid': bool, whether the shot was taken
                - 'result': 'hit', 'miss', 'already_shot', 'invalid',
                  'inactive' or 'not_your_turn'
                - 'coordinate': the (row, col) shot at, or the raw input
                - 'sunk': the sunk Ship, None otherwise
                - 'message': human-readable result message
        """
        if isinstance(coord, str):
            try:
                coord = self.parse_coordinate(coord)
            except ValueError as e:
                return self._shot_result(False, "invalid", coord, None, str(e))

        row, col = coord
        if not (0 <= row < self.BOARD_SIZE and 0 <= col < self.BOARD_SIZE):
            return self._shot_result(False, "invalid", coord, None, f"{coord} is off the board.")
        if self.phase is not GamePhase.PLAYING:
            return self._shot_result(False, "inactive", coord, None, "The game is not in progress.")
        if self.current_turn is not Side.PLAYER:
            return self._shot_result(False, "not_your_turn", coord, None, "Wait for the enemy to fire.")

        if self.computer_board[row][col].state in (CellState.HIT, CellState.MISS):
            self.message = "You already shot here. Choose another cell."
            return self._shot_result(False, "already_shot", coord, None, self.message)

        outcome = process_shot(self.computer_board, self.computer_ships, coord)
        self.computer_board = outcome.board
        self.computer_ships = outcome.ships
        self._record_shot(Side.PLAYER, outcome.hit)

        label = self.format_coordinate(row, col)
        message = f"Hit at {label}!" if outcome.hit else f"Miss at {label}."
        if outcome.sunk_ship is not None:
            message = f"You sunk the enemy {outcome.sunk_ship.name} (size {outcome.sunk_ship.size}) at {label}!"

        if check_game_over(self.computer_ships):
            self._finish(Side.PLAYER, "Congratulations! You won!")
        else:
            self.current_turn = Side.COMPUTER
            self.message = message

        return self._shot_result(True, "hit" if outcome.hit else "miss", coord, outcome.sunk_ship, message)

    def computer_turn(self) -> Dict:
        """
        Let the computer fire once at the player's board.

        Returns:
            Dict with the same keys as player_fire.
        """
        if self.phase is not GamePhase.PLAYING:
            return self._shot_result(False, "inactive", None, None, "The game is not in progress.")
        if self.current_turn is not Side.COMPUTER:
            return self._shot_result(False, "not_your_turn", None, None, "It is the player's turn.")

        move = self.ai.select_action(self.player_board)
        outcome = process_shot(self.player_board, self.player_ships, move)
        self.player_board = outcome.board
        self.player_ships = outcome.ships
        self._record_shot(Side.COMPUTER, outcome.hit)

        self.ai.observe(move, outcome.hit, outcome.board)
        if outcome.sunk_ship is not None:
            self.ai.observe_sink(outcome.board, outcome.ships)

        label = self.format_coordinate(*move)
        if outcome.sunk_ship is not None:
            message = f"Enemy sunk your {outcome.sunk_ship.name} (size {outcome.sunk_ship.size}) at {label}!"
        elif outcome.hit:
            message = f"Enemy hit your ship at {label}!"
        else:
            message = f"Enemy missed at {label}."

        if check_game_over(self.player_ships):
            self._finish(Side.COMPUTER, f"Game Over! {self.enemy_name} won.")
        else:
            self.current_turn = Side.PLAYER
            self.message = f"{message} Your turn!"

        return self._shot_result(True, "hit" if outcome.hit else "miss", move, outcome.sunk_ship, message)

    def play_round(self, coord: Union[str, Coordinate]) -> Dict:
        """
        Fire at coord and, if the game goes on, let the computer reply.

        Returns:
            Dict with 'player' and 'computer' shot results ('computer'
            is None when the computer did not fire).
        """
        player_result = self.player_fire(coord)
        computer_result = None
        if player_result["valid"] and self.phase is GamePhase.PLAYING:
            computer_result = self.computer_turn()
        return {"player": player_result, "computer": computer_result}

    def _record_shot(self, side: Side, hit: bool) -> None:
        self.shots_fired[side] += 1
        if hit:
            self.hits[side] += 1

    def _finish(self, winner: Side, message: str) -> None:
        self.winner = winner
        self.phase = GamePhase.GAME_OVER
        self.message = message
        logger.info(f"Game over: {winner.value} wins")

    # ------------------------------------------------------------------
    # Status and rendering
    # ------------------------------------------------------------------

    def is_game_over(self) -> bool:
        """Check if one fleet has been sunk."""
        return self.phase is GamePhase.GAME_OVER

    def _side_status(self, ships: List[Ship], shooter: Side) -> Dict:
        ships_remaining = sum(1 for ship in ships if not ship.sunk)
        shots = self.shots_fired[shooter]
        hits = self.hits[shooter]
        return {
            "ships_remaining": ships_remaining,
            "ships_sunk": len(ships) - ships_remaining,
            "total_ships": len(ships),
            "sunk_ships": [ship.name for ship in ships if ship.sunk],
            "shots_fired": shots,
            "hits": hits,
            "misses": shots - hits,
        }

    def get_game_status(self) -> Dict:
        """
        Get current game status.

        Returns:
            Dict with phase, turn, winner and per-side statistics. The
            'player' entry describes the player's fleet and the computer's
            shots at it; 'computer' the other way round.
        """
        return {
            "phase": self.phase.value,
            "game_over": self.is_game_over(),
            "current_turn": self.current_turn.value,
            "winner": self.winner.value if self.winner else None,
            "enemy_name": self.enemy_name,
            "ai_mode": self.ai.mode.value,
            "player": self._side_status(self.player_ships, Side.COMPUTER),
            "computer": self._side_status(self.computer_ships, Side.PLAYER),
        }

    def get_board_string(self, side: Side = Side.PLAYER, reveal: Optional[bool] = None) -> str:
        """
        Get a board as an ASCII string.

        Args:
            side: Whose board to render
            reveal: Show unhit ships (default: only on the player's own board)

        Returns:
            ASCII representation of the board.
        """
        board = self.player_board if side is Side.PLAYER else self.computer_board
        if reveal is None:
            reveal = side is Side.PLAYER

        lines = []

        header = "    |" + "|".join(f"{i:^3}" for i in range(1, self.BOARD_SIZE + 1))
        lines.append(header)

        for row_idx, row in enumerate(board):
            row_label = self.ROW_LABELS[row_idx]
            symbols = []
            for cell in row:
                if cell.state is CellState.SHIP and not reveal:
                    symbols.append(CellState.EMPTY.value)
                else:
                    symbols.append(cell.state.value)
            cells = "|".join(f" {symbol} " for symbol in symbols)
            lines.append(f"  {row_label} |{cells}")

        return "\n".join(lines)
