# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""
Unit tests for Battleship game logic.
"""

import random
import sys
from itertools import combinations
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ai.hunt_target import HuntState
from game.battleship_game import ENEMY_NAMES, BattleshipGame, GamePhase, Side
from game.board import (
    SHIP_SIZES,
    CellState,
    Orientation,
    PlacementError,
    Ship,
    can_place_ship,
    clamp_origin,
    create_empty_board,
    place_ship,
    place_ships_randomly,
    ship_class_name,
)
from game.shots import check_game_over, live_hits, process_shot


def make_fleet(*placements):
    """Build a board and fleet from (origin, size, orientation) tuples."""
    board = create_empty_board()
    ships = []
    for ship_id, (origin, size, orientation) in enumerate(placements):
        assert can_place_ship(board, origin, size, orientation)
        board, positions = place_ship(board, origin, size, orientation, ship_id)
        ships.append(Ship(id=ship_id, size=size, positions=tuple(positions)))
    return board, ships


def place_standard_fleet(game: BattleshipGame):
    """Place the player's fleet on rows A, C, E, G and I."""
    for index in range(len(SHIP_SIZES)):
        result = game.place_player_ship((index * 2, 0), Orientation.HORIZONTAL)
        assert result["valid"] is True


class TestPlacement:
    """Tests for placement validation."""

    def test_empty_board(self):
        """Test a new board is 10x10 and empty."""
        board = create_empty_board()
        assert len(board) == 10
        assert all(len(row) == 10 for row in board)
        assert all(cell.state is CellState.EMPTY for row in board for cell in row)

    def test_can_place_on_empty_board(self):
        """Test placements that fit."""
        board = create_empty_board()
        assert can_place_ship(board, (0, 0), 5, Orientation.HORIZONTAL)
        assert can_place_ship(board, (5, 9), 5, Orientation.VERTICAL)

    def test_out_of_bounds_rejected(self):
        """Test runs past any edge are refused."""
        board = create_empty_board()
        assert not can_place_ship(board, (0, 6), 5, Orientation.HORIZONTAL)
        assert not can_place_ship(board, (9, 0), 2, Orientation.VERTICAL)
        assert not can_place_ship(board, (-1, 0), 2, Orientation.VERTICAL)
        assert not can_place_ship(board, (0, 10), 2, Orientation.HORIZONTAL)

    def test_overlap_rejected(self):
        """Test overlapping placements are refused."""
        board, _ = make_fleet(((0, 0), 5, Orientation.HORIZONTAL))
        assert not can_place_ship(board, (0, 2), 3, Orientation.VERTICAL)

    def test_diagonal_adjacency_rejected(self):
        """Test a ship touching another only diagonally is refused."""
        board, _ = make_fleet(((0, 0), 2, Orientation.HORIZONTAL))
        assert not can_place_ship(board, (1, 2), 2, Orientation.HORIZONTAL)

    def test_orthogonal_adjacency_rejected(self):
        """Test a ship directly alongside another is refused."""
        board, _ = make_fleet(((0, 0), 2, Orientation.HORIZONTAL))
        assert not can_place_ship(board, (1, 0), 2, Orientation.HORIZONTAL)
        assert not can_place_ship(board, (0, 2), 2, Orientation.HORIZONTAL)

    def test_one_cell_gap_accepted(self):
        """Test a one-cell gap is enough."""
        board, _ = make_fleet(((0, 0), 2, Orientation.HORIZONTAL))
        assert can_place_ship(board, (2, 0), 2, Orientation.HORIZONTAL)
        assert can_place_ship(board, (0, 3), 2, Orientation.HORIZONTAL)

    def test_place_ship_returns_new_board(self):
        """Test place_ship leaves its input untouched."""
        board = create_empty_board()
        new_board, positions = place_ship(board, (2, 3), 3, Orientation.VERTICAL, 7)

        assert positions == [(2, 3), (3, 3), (4, 3)]
        assert board[2][3].state is CellState.EMPTY
        for row, col in positions:
            assert new_board[row][col].state is CellState.SHIP
            assert new_board[row][col].ship_id == 7

    def test_clamp_origin(self):
        """Test clamping shifts runs back onto the board."""
        assert clamp_origin((0, 8), 5, Orientation.HORIZONTAL) == (0, 5)
        assert clamp_origin((8, 3), 4, Orientation.VERTICAL) == (6, 3)
        assert clamp_origin((2, 2), 3, Orientation.HORIZONTAL) == (2, 2)
        assert clamp_origin((9, 9), 2, Orientation.HORIZONTAL) == (9, 8)


class TestRandomPlacement:
    """Tests for random fleet placement."""

    @pytest.mark.parametrize("seed", range(20))
    def test_fleet_respects_buffer(self, seed):
        """Test no two ships touch, diagonals included."""
        board, ships = place_ships_randomly(SHIP_SIZES, random.Random(seed))

        assert [ship.size for ship in ships] == SHIP_SIZES
        assert [ship.id for ship in ships] == list(range(len(SHIP_SIZES)))

        for first, second in combinations(ships, 2):
            for r1, c1 in first.positions:
                for r2, c2 in second.positions:
                    assert max(abs(r1 - r2), abs(c1 - c2)) > 1

        occupied = sum(1 for row in board for cell in row if cell.state is CellState.SHIP)
        assert occupied == sum(SHIP_SIZES)

    def test_positions_are_straight_runs(self):
        """Test every ship occupies a contiguous single-orientation run."""
        _, ships = place_ships_randomly(SHIP_SIZES, random.Random(3))
        for ship in ships:
            rows = {row for row, _ in ship.positions}
            cols = {col for _, col in ship.positions}
            assert len(ship.positions) == ship.size
            assert len(rows) == 1 or len(cols) == 1
            span = max(cols) - min(cols) if len(rows) == 1 else max(rows) - min(rows)
            assert span == ship.size - 1

    def test_deterministic_with_seed(self):
        """Test the same seed gives the same fleet."""
        _, ships1 = place_ships_randomly(SHIP_SIZES, random.Random(123))
        _, ships2 = place_ships_randomly(SHIP_SIZES, random.Random(123))
        assert [s.positions for s in ships1] == [s.positions for s in ships2]

    def test_exhaustion_raises(self):
        """Test an impossible fleet fails instead of looping forever."""
        with pytest.raises(PlacementError):
            place_ships_randomly([5] * 20, random.Random(0), max_attempts=50)


class TestShotResolution:
    """Tests for process_shot."""

    def test_hit_then_sink(self):
        """Test hitting and sinking a two-cell ship."""
        board, ships = make_fleet(((3, 3), 2, Orientation.HORIZONTAL))

        first = process_shot(board, ships, (3, 3))
        assert first.hit is True
        assert first.sunk_ship is None
        assert first.ships[0].hits == 1
        assert first.board[3][3].state is CellState.HIT

        second = process_shot(first.board, first.ships, (3, 4))
        assert second.hit is True
        assert second.sunk_ship is not None
        assert second.sunk_ship.id == 0
        assert second.sunk_ship.sunk is True
        assert check_game_over(second.ships)

    def test_miss(self):
        """Test a shot at open water."""
        board, ships = make_fleet(((3, 3), 2, Orientation.HORIZONTAL))
        outcome = process_shot(board, ships, (7, 7))

        assert outcome.hit is False
        assert outcome.sunk_ship is None
        assert outcome.board[7][7].state is CellState.MISS

    def test_inputs_not_mutated(self):
        """Test the caller's board and fleet are left as they were."""
        board, ships = make_fleet(((3, 3), 2, Orientation.HORIZONTAL))
        process_shot(board, ships, (3, 3))

        assert board[3][3].state is CellState.SHIP
        assert ships[0].hits == 0
        assert ships[0].sunk is False

    def test_repeat_shot_does_not_double_count(self):
        """Test resolving an already hit cell changes nothing."""
        board, ships = make_fleet(((3, 3), 2, Orientation.HORIZONTAL))
        first = process_shot(board, ships, (3, 3))
        again = process_shot(first.board, first.ships, (3, 3))

        assert again.hit is False
        assert again.ships[0].hits == 1
        assert again.board[3][3].state is CellState.HIT

        missed = process_shot(first.board, first.ships, (0, 0))
        again = process_shot(missed.board, missed.ships, (0, 0))
        assert again.board[0][0].state is CellState.MISS

    def test_sunk_only_when_every_cell_hit(self):
        """Test the sunk flag tracks hit cells exactly."""
        board, ships = make_fleet(((1, 1), 4, Orientation.VERTICAL))
        for index, position in enumerate(ships[0].positions):
            outcome = process_shot(board, ships, position)
            board, ships = outcome.board, outcome.ships
            assert ships[0].hits == index + 1
            assert ships[0].sunk == (index == 3)
            assert ships[0].hits <= ships[0].size

    def test_game_over(self):
        """Test fleet-wide sink detection."""
        board, ships = make_fleet(
            ((0, 0), 2, Orientation.HORIZONTAL),
            ((5, 5), 2, Orientation.VERTICAL),
        )
        assert not check_game_over(ships)
        for position in ships[0].positions:
            outcome = process_shot(board, ships, position)
            board, ships = outcome.board, outcome.ships
        assert not check_game_over(ships)

    def test_game_over_empty_fleet(self):
        """Test an empty fleet counts as sunk."""
        assert check_game_over([]) is True

    def test_live_hits(self):
        """Test only hits on ships still afloat are reported."""
        board, ships = make_fleet(
            ((0, 0), 2, Orientation.HORIZONTAL),
            ((5, 5), 3, Orientation.VERTICAL),
        )
        for position in [(0, 0), (0, 1), (6, 5)]:
            outcome = process_shot(board, ships, position)
            board, ships = outcome.board, outcome.ships
        assert live_hits(board, ships) == [(6, 5)]


class TestShipNames:
    """Tests for vessel class naming."""

    def test_standard_names(self):
        """Test names by size and id."""
        assert ship_class_name(5, 0) == "Aircraft Carrier"
        assert ship_class_name(4, 1) == "Battleship"
        assert ship_class_name(3, 2) == "Cruiser"
        assert ship_class_name(3, 3) == "Submarine"
        assert ship_class_name(2, 4) == "Destroyer"

    def test_ship_name_property(self):
        """Test a Ship reports its class name."""
        assert Ship(id=2, size=3).name == "Cruiser"


class TestBattleshipGame:
    """Tests for BattleshipGame orchestration."""

    def test_game_creation(self):
        """Test creating a new game."""
        game = BattleshipGame(seed=42)

        assert game.BOARD_SIZE == 10
        assert game.phase is GamePhase.SETUP
        assert game.current_ship_size == 5
        assert game.player_ships == []
        assert game.enemy_name in ENEMY_NAMES
        assert isinstance(game.ai_state, HuntState)

    def test_parse_coordinate_valid(self):
        """Test parsing valid coordinates."""
        game = BattleshipGame(seed=0)

        assert game.parse_coordinate("A1") == (0, 0)
        assert game.parse_coordinate("A10") == (0, 9)
        assert game.parse_coordinate("J1") == (9, 0)
        assert game.parse_coordinate("J10") == (9, 9)
        assert game.parse_coordinate("e5") == (4, 4)
        assert game.parse_coordinate(" B3 ") == (1, 2)

    def test_parse_coordinate_invalid(self):
        """Test parsing invalid coordinates."""
        game = BattleshipGame(seed=0)

        for bad in ("K1", "A0", "A11", "AA", ""):
            with pytest.raises(ValueError):
                game.parse_coordinate(bad)

    def test_format_coordinate(self):
        """Test formatting coordinates."""
        game = BattleshipGame(seed=0)

        assert game.format_coordinate(0, 0) == "A1"
        assert game.format_coordinate(0, 9) == "A10"
        assert game.format_coordinate(4, 4) == "E5"

    def test_manual_placement(self):
        """Test placing the fleet ship by ship."""
        game = BattleshipGame(seed=0)
        place_standard_fleet(game)

        assert game.all_ships_placed
        assert game.current_ship_size is None
        assert [ship.size for ship in game.player_ships] == SHIP_SIZES
        assert game.player_ships[0].positions[-1] == (0, 4)

    def test_rejected_placement_changes_nothing(self):
        """Test a refused placement keeps the setup state."""
        game = BattleshipGame(seed=0)
        game.place_player_ship((0, 0), Orientation.HORIZONTAL)
        board_before = [list(row) for row in game.player_board]

        result = game.place_player_ship((1, 5), Orientation.HORIZONTAL)

        assert result["valid"] is False
        assert "1-cell gap" in result["message"]
        assert game.current_ship_index == 1
        assert game.player_board == board_before

    def test_placement_is_clamped(self):
        """Test a ship hanging off the right edge is pulled back."""
        game = BattleshipGame(seed=0)
        result = game.place_player_ship((0, 8), Orientation.HORIZONTAL)

        assert result["valid"] is True
        assert result["ship"].positions == ((0, 5), (0, 6), (0, 7), (0, 8), (0, 9))

    def test_toggle_orientation(self):
        """Test the setup orientation toggle."""
        game = BattleshipGame(seed=0)
        assert game.toggle_orientation() is Orientation.VERTICAL
        result = game.place_player_ship((0, 0))
        assert result["ship"].positions[1] == (1, 0)

    def test_explicit_orientation_carries_over(self):
        """Test an orientation given with a placement is kept for the next ship."""
        game = BattleshipGame(seed=0)
        result = game.place_player_ship((0, 0), Orientation.VERTICAL)

        assert result["valid"] is True
        assert game.orientation is Orientation.VERTICAL
        assert Orientation.VERTICAL.value in result["message"]

        result = game.place_player_ship((0, 2))
        assert result["ship"].positions[1] == (1, 2)

    def test_refused_placement_keeps_orientation(self):
        """Test a refused placement leaves the setup orientation alone."""
        game = BattleshipGame(seed=0)
        game.place_player_ship((0, 0), Orientation.HORIZONTAL)

        result = game.place_player_ship((1, 0), Orientation.VERTICAL)

        assert result["valid"] is False
        assert game.orientation is Orientation.HORIZONTAL

    def test_start_requires_full_fleet(self):
        """Test the game cannot start mid-setup."""
        game = BattleshipGame(seed=0)
        assert game.start_game() is False
        place_standard_fleet(game)
        assert game.start_game() is True
        assert game.phase is GamePhase.PLAYING
        assert len(game.computer_ships) == 5

    def test_fire_before_start(self):
        """Test shots are refused during setup."""
        game = BattleshipGame(seed=0)
        result = game.player_fire("A1")
        assert result["valid"] is False
        assert result["result"] == "inactive"

    def test_player_fire_flips_turn(self):
        """Test a valid shot hands the turn to the computer."""
        game = BattleshipGame(seed=1)
        game.place_player_ships_randomly()
        game.start_game()

        result = game.player_fire("A1")
        assert result["valid"] is True
        assert result["result"] in ("hit", "miss")
        assert game.current_turn is Side.COMPUTER

        blocked = game.player_fire("B1")
        assert blocked["result"] == "not_your_turn"

        reply = game.computer_turn()
        assert reply["valid"] is True
        assert game.current_turn is Side.PLAYER

    def test_repeat_shot_rejected(self):
        """Test shooting the same cell twice is refused without side effects."""
        game = BattleshipGame(seed=2)
        game.place_player_ships_randomly()
        game.start_game()

        game.play_round("C3")
        board_before = [list(row) for row in game.computer_board]
        shots_before = game.shots_fired[Side.PLAYER]

        result = game.player_fire("C3")

        assert result["valid"] is False
        assert result["result"] == "already_shot"
        assert game.computer_board == board_before
        assert game.shots_fired[Side.PLAYER] == shots_before
        assert game.current_turn is Side.PLAYER

    def test_invalid_coordinate(self):
        """Test a malformed coordinate is refused."""
        game = BattleshipGame(seed=2)
        game.place_player_ships_randomly()
        game.start_game()

        result = game.player_fire("Z99")
        assert result["valid"] is False
        assert result["result"] == "invalid"

    def test_player_wins(self):
        """Test sinking the whole enemy fleet."""
        game = BattleshipGame(seed=5)
        place_standard_fleet(game)
        game.start_game()

        sunk = []
        targets = [pos for ship in game.computer_ships for pos in ship.positions]
        for position in targets:
            result = game.play_round(position)
            if result["player"]["sunk"]:
                sunk.append(result["player"]["sunk"].id)
            if game.is_game_over():
                break

        assert game.winner is Side.PLAYER
        assert game.phase is GamePhase.GAME_OVER
        assert sorted(sunk) == [0, 1, 2, 3, 4]
        assert game.player_fire(targets[0])["result"] == "inactive"

    def test_computer_wins_without_repeating(self):
        """Test the computer clears the player's board without firing twice at a cell."""
        game = BattleshipGame(seed=7)
        game.place_player_ships_randomly()
        game.start_game()

        fired = set()
        for _ in range(100):
            game.current_turn = Side.COMPUTER
            result = game.computer_turn()
            assert result["coordinate"] not in fired
            fired.add(result["coordinate"])
            if game.is_game_over():
                break

        assert game.winner is Side.COMPUTER
        assert all(ship.sunk for ship in game.player_ships)
        assert isinstance(game.ai_state, HuntState)

    def test_seeded_games_replay(self):
        """Test two games with the same seed play out identically."""
        moves = []
        for _ in range(2):
            game = BattleshipGame(seed=11)
            game.place_player_ships_randomly()
            game.start_game()
            sequence = []
            for row in range(10):
                result = game.play_round((row, row))
                sequence.append(result["computer"]["coordinate"])
            moves.append(sequence)
        assert moves[0] == moves[1]

    def test_reset(self):
        """Test reset returns to a clean setup."""
        game = BattleshipGame(seed=3)
        game.place_player_ships_randomly()
        game.start_game()
        game.play_round("A1")

        game.reset()

        assert game.phase is GamePhase.SETUP
        assert game.player_ships == []
        assert game.computer_ships == []
        assert game.winner is None
        assert isinstance(game.ai_state, HuntState)
        assert game.get_game_status()["computer"]["shots_fired"] == 0

    def test_get_board_string(self):
        """Test board rendering hides enemy ships."""
        game = BattleshipGame(seed=4)
        game.place_player_ships_randomly()
        game.start_game()

        own = game.get_board_string(Side.PLAYER)
        enemy = game.get_board_string(Side.COMPUTER)

        assert "| 1 |" in own
        assert "  A |" in own
        assert "  J |" in own
        assert " S " in own
        assert " S " not in enemy
        assert " S " in game.get_board_string(Side.COMPUTER, reveal=True)

    def test_get_game_status(self):
        """Test game status reporting."""
        game = BattleshipGame(seed=42)
        game.place_player_ships_randomly()
        game.start_game()

        status = game.get_game_status()

        assert status["game_over"] is False
        assert status["phase"] == "playing"
        assert status["winner"] is None
        assert status["ai_mode"] == "hunt"
        assert status["player"]["ships_remaining"] == 5
        assert status["computer"]["total_ships"] == 5
        assert status["computer"]["shots_fired"] == 0
        assert status["computer"]["sunk_ships"] == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
