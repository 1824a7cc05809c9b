"""Tests for snake draft pick math"""
import pytest

from draftlab.utils.snake_draft import SnakeDraftCalculator


class TestSnakeDraftCalculator:
    """Test pick order in snake drafts"""

    def setup_method(self):
        self.calculator = SnakeDraftCalculator()

    def test_round_order_alternates(self):
        assert self.calculator.round_order(1, 4) == [1, 2, 3, 4]
        assert self.calculator.round_order(2, 4) == [4, 3, 2, 1]
        assert self.calculator.round_order(3, 4) == [1, 2, 3, 4]

    def test_overall_pick(self):
        assert self.calculator.overall_pick(1, 3, 10) == 3
        assert self.calculator.overall_pick(2, 3, 10) == 18
        assert self.calculator.overall_pick(2, 10, 10) == 11

    def test_picking_position(self):
        assert self.calculator.get_picking_position(10, 10) == 10
        assert self.calculator.get_picking_position(11, 10) == 10
        assert self.calculator.get_picking_position(20, 10) == 1
        assert self.calculator.get_picking_position(21, 10) == 1
        assert self.calculator.get_picking_position(11, 10, is_snake_draft=False) == 1

    def test_round_and_pick(self):
        assert self.calculator.get_round_and_pick(1, 10) == (1, 1)
        assert self.calculator.get_round_and_pick(15, 10) == (2, 5)

    def test_picks_until_team_turn(self):
        assert self.calculator.picks_until_team_turn(10, 10, 10) == 0
        assert self.calculator.picks_until_team_turn(1, 10, 10) == 9
        assert self.calculator.picks_until_team_turn(11, 10, 1) == 9

    def test_team_pick_numbers(self):
        assert self.calculator.team_pick_numbers(1, 10, 4) == [1, 20, 21, 40]
        assert self.calculator.team_pick_numbers(10, 10, 3) == [10, 11, 30]

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            self.calculator.round_order(0, 10)
        with pytest.raises(ValueError):
            self.calculator.round_order(1, 0)
        with pytest.raises(ValueError):
            self.calculator.get_picking_position(0, 10)
