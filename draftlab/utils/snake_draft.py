"""
Snake draft order calculation utilities.

Draft positions are 1-based. Odd rounds run 1..N, even rounds run N..1.
"""

from typing import List, Tuple


class SnakeDraftCalculator:
    """
    Utility class for snake draft order calculations.

    Snake drafts reverse direction each round:
    Round 1: 1, 2, 3, 4, 5, 6, 7, 8, 9, 10
    Round 2: 10, 9, 8, 7, 6, 5, 4, 3, 2, 1
    Round 3: 1, 2, 3, 4, 5, 6, 7, 8, 9, 10
    """

    def round_order(self, round_number: int, team_count: int) -> List[int]:
        """Draft positions in the order they pick during a round."""
        if round_number < 1:
            raise ValueError("Round number must be >= 1")
        if team_count < 1:
            raise ValueError("Team count must be >= 1")

        order = list(range(1, team_count + 1))
        if round_number % 2 == 0:
            order.reverse()
        return order

    def get_picking_position(self, pick_number: int, team_count: int, is_snake_draft: bool = True) -> int:
        """
        Determine which draft position picks at a given overall pick.

        Args:
            pick_number: Overall pick number (1-based)
            team_count: Number of teams in draft
            is_snake_draft: Whether order reverses every round

        Returns:
            Draft position (1-based)
        """
        if pick_number < 1:
            raise ValueError("Pick number must be >= 1")

        round_number, pick_in_round = self.get_round_and_pick(pick_number, team_count)

        if not is_snake_draft or round_number % 2 == 1:
            return pick_in_round
        return team_count - pick_in_round + 1

    def get_round_and_pick(self, pick_number: int, team_count: int) -> Tuple[int, int]:
        round_number = ((pick_number - 1) // team_count) + 1
        pick_in_round = ((pick_number - 1) % team_count) + 1
        return round_number, pick_in_round

    def overall_pick(self, round_number: int, draft_position: int, team_count: int) -> int:
        """Overall pick number for a draft position in a given round."""
        if round_number % 2 == 1:
            return (round_number - 1) * team_count + draft_position
        return (round_number - 1) * team_count + (team_count - draft_position + 1)

    def picks_until_team_turn(self,
                              current_pick: int,
                              team_count: int,
                              draft_position: int,
                              is_snake_draft: bool = True) -> int:
        """
        Calculate how many picks until a draft position is on the clock.

        Returns 0 when that position is picking now.
        """
        check_pick = current_pick
        for _ in range(team_count * 2):
            if self.get_picking_position(check_pick, team_count, is_snake_draft) == draft_position:
                return check_pick - current_pick
            check_pick += 1

        # Shouldn't reach here in normal circumstances
        return team_count

    def team_pick_numbers(self, draft_position: int, team_count: int, total_rounds: int) -> List[int]:
        """Every overall pick a draft position owns."""
        return [self.overall_pick(round_number, draft_position, team_count)
                for round_number in range(1, total_rounds + 1)]
