"""
Tests for the multi-factor game state evaluator.
"""

import pytest

from board import Position
from config import EVALUATION_WEIGHTS
from evaluator import CRITICAL, HEALTHY, LOW, GameStateEvaluator

FACTOR_NAMES = {"health", "foodAccess", "spaceControl", "threatLevel", "position", "pathSafety"}


@pytest.fixture
def evaluator_factory(board_factory, snake_factory):
    def factory(body, health=100, others=(), food=(), width=11, height=11):
        you = snake_factory("you", body, health=health)
        board = board_factory(you, others, food=food, width=width, height=height)
        return GameStateEvaluator(board)
    return factory


class TestGameState:
    """Tests for the combined evaluation."""

    def test_result_shape(self, open_state):
        result = GameStateEvaluator.from_game_state(open_state).evaluate_game_state()

        assert set(result.factors) == FACTOR_NAMES
        assert 0.0 <= result.overall_score <= 1.0
        assert isinstance(result.recommendations, list)

    def test_every_factor_is_normalized(self, open_state):
        result = GameStateEvaluator.from_game_state(open_state).evaluate_game_state()
        for factor in result.factors.values():
            assert 0.0 <= factor.score <= 1.0

    def test_board_is_not_modified(self, open_state):
        evaluator = GameStateEvaluator.from_game_state(open_state)
        before = evaluator.board.occupancy.copy()
        evaluator.evaluate_game_state()
        assert (evaluator.board.occupancy == before).all()

    def test_healthier_state_scores_higher(self, evaluator_factory):
        body = [(5, 5), (5, 4), (5, 3)]
        hungry = evaluator_factory(body, health=10).evaluate_game_state()
        fed = evaluator_factory(body, health=100).evaluate_game_state()
        assert fed.overall_score > hungry.overall_score


class TestHealth:
    """Tests for health evaluation."""

    @pytest.mark.parametrize("health,status", [(10, CRITICAL), (30, CRITICAL), (45, LOW), (90, HEALTHY)])
    def test_status(self, evaluator_factory, health, status):
        assert evaluator_factory([(5, 5), (5, 4)], health=health).evaluate_health().status == status

    def test_critical_recommends_food(self, evaluator_factory):
        result = evaluator_factory([(5, 5), (5, 4), (5, 3)], health=10).evaluate_game_state()
        assert result.factors["health"].status == "critical"
        assert result.factors["health"].is_critical
        assert "seek food immediately" in result.recommendations

    def test_can_hunt_threshold(self, evaluator_factory):
        assert evaluator_factory([(5, 5)], health=70).evaluate_health().can_hunt
        assert not evaluator_factory([(5, 5)], health=69).evaluate_health().can_hunt


class TestFoodAccess:
    """Tests for food evaluation."""

    def test_no_food(self, evaluator_factory):
        evaluation = evaluator_factory([(5, 5), (5, 4)]).evaluate_food_access()
        assert evaluation.score == 0.0
        assert evaluation.best_target is None

    def test_nearest_food_is_best_on_open_board(self, evaluator_factory):
        evaluation = evaluator_factory([(5, 5), (5, 4)], food=[(5, 7), (0, 10)]).evaluate_food_access()
        assert evaluation.best_target == Position(5, 7)
        assert evaluation.nearest_distance == 2
        assert len(evaluation.options) == 2


class TestThreats:
    """Tests for threat detection."""

    def test_adjacent_longer_snake_is_immediate(self, evaluator_factory, snake_factory):
        other = snake_factory("other", [(6, 5), (7, 5), (8, 5), (9, 5)])
        evaluation = evaluator_factory([(5, 5), (5, 4), (5, 3)], others=[other]).evaluate_threats()

        assert len(evaluation.immediate_threats) == 1
        threat = evaluation.immediate_threats[0]
        assert threat.snake_id == "other"
        assert threat.distance == 1
        assert threat.is_dangerous
        assert evaluation.score == pytest.approx(0.7)

    def test_potential_threat(self, evaluator_factory, snake_factory):
        other = snake_factory("other", [(8, 5), (9, 5), (10, 5)])
        evaluation = evaluator_factory([(5, 5), (5, 4), (5, 3)], others=[other]).evaluate_threats()

        assert evaluation.immediate_threats == []
        assert len(evaluation.potential_threats) == 1
        assert evaluation.score == pytest.approx(0.9)

    def test_smaller_snake_is_an_opportunity(self, evaluator_factory, snake_factory):
        other = snake_factory("other", [(6, 6), (7, 6)])
        evaluator = evaluator_factory([(5, 5), (5, 4), (5, 3)], others=[other])

        evaluation = evaluator.evaluate_threats()
        assert evaluation.score == 1.0
        assert [t.snake_id for t in evaluation.hunting_opportunities] == ["other"]
        assert "hunt smaller snakes" in evaluator.evaluate_game_state().recommendations


class TestSpaceAndPosition:
    """Tests for space control, position and path safety."""

    def test_boxed_in(self, evaluator_factory):
        evaluator = evaluator_factory([(0, 0), (0, 1), (1, 1), (1, 0)], width=5, height=5)
        result = evaluator.evaluate_game_state()

        assert result.factors["spaceControl"].area == 0
        assert result.factors["spaceControl"].is_trapped
        assert result.factors["position"].is_cornered
        assert result.factors["pathSafety"].score == 0.0
        assert result.factors["pathSafety"].safest_direction is None
        assert "find escape route" in result.recommendations
        assert "move away from walls" in result.recommendations

    def test_center(self, evaluator_factory):
        evaluation = evaluator_factory([(5, 5), (5, 4)]).evaluate_position()
        assert evaluation.is_center
        assert evaluation.center_distance == 0.0
        assert evaluation.wall_distance == 5

    def test_open_board_is_not_trapped(self, evaluator_factory):
        evaluation = evaluator_factory([(5, 5), (5, 4)]).evaluate_space_control()
        assert not evaluation.is_trapped
        assert evaluation.area == 121 - 2
        assert evaluation.escape_routes == 3

    def test_path_safety_prefers_open_side(self, evaluator_factory, snake_factory):
        # (0, 1) is a one-cell pocket between our body and a short opponent
        other = snake_factory("other", [(0, 2), (0, 3)])
        evaluator = evaluator_factory([(1, 1), (1, 0), (0, 0)], others=[other], width=5, height=5)
        evaluation = evaluator.evaluate_path_safety()

        assert evaluation.direction_scores["down"] == 0.0
        assert evaluation.direction_scores["right"] > evaluation.direction_scores["left"] > 0.0
        assert evaluation.safest_direction == "up"


class TestScoringMath:
    """Tests pinning the factor formulas and the weighted blend."""

    def test_overall_is_weighted_sum(self, evaluator_factory, snake_factory):
        other = snake_factory("other", [(8, 5), (9, 5), (10, 5)])
        result = evaluator_factory(
            [(5, 5), (5, 4), (5, 3)], health=45, others=[other], food=[(2, 8)]
        ).evaluate_game_state()

        expected = sum(weight * result.factors[name].score for name, weight in EVALUATION_WEIGHTS.items())
        assert result.overall_score == pytest.approx(expected)

    def test_weights_sum_to_one(self):
        assert sum(EVALUATION_WEIGHTS.values()) == pytest.approx(1.0)

    @pytest.mark.parametrize("health,expected", [
        (20, (0.7 * 0.2 + 0.3 * 3 / 20) * 0.8),  # critical multiplier
        (30, (0.7 * 0.3 + 0.3 * 3 / 20) * 0.8),
        (80, 0.7 * 0.8 + 0.3 * 3 / 20),  # no bonus at exactly 80
        (90, 0.7 * 0.9 + 0.3 * 3 / 20 + 0.1),  # well-fed bonus
    ])
    def test_health_score(self, evaluator_factory, health, expected):
        evaluation = evaluator_factory([(5, 5), (5, 4), (5, 3)], health=health).evaluate_health()
        assert evaluation.score == pytest.approx(expected)

    def test_length_term_is_capped(self, evaluator_factory):
        body = [(x, 0) for x in range(10, -1, -1)] + [(x, 1) for x in range(11)]
        evaluation = evaluator_factory(body, health=50).evaluate_health()
        assert evaluation.score == pytest.approx(0.7 * 0.5 + 0.3)

    def test_food_urgency_when_critical(self, evaluator_factory):
        body = [(5, 5), (5, 4)]
        normal = evaluator_factory(body, health=60, food=[(0, 10)]).evaluate_food_access()
        critical = evaluator_factory(body, health=20, food=[(0, 10)]).evaluate_food_access()

        assert normal.score == pytest.approx(0.6 * (1 - 10 / 20) + 0.4 * 119 / 121)
        assert critical.score == pytest.approx(normal.score * 1.2)

    def test_threat_score_floors_at_zero(self, evaluator_factory, snake_factory):
        others = [
            snake_factory("a", [(5, 7), (5, 8)]),
            snake_factory("b", [(3, 5), (2, 5)]),
            snake_factory("c", [(7, 5), (8, 5)]),
            snake_factory("d", [(5, 3), (5, 2)]),
        ]
        evaluation = evaluator_factory([(5, 5), (5, 4)], others=others).evaluate_threats()

        assert len(evaluation.immediate_threats) == 4
        assert all(t.is_dangerous for t in evaluation.immediate_threats)
        assert evaluation.score == 0.0

    @pytest.mark.parametrize("width,head_x,area,trapped", [
        (5, 1, 3, False),  # floor of 3 cells applies
        (5, 2, 2, True),
        (40, 35, 4, False),  # 10% of 40 cells applies
        (40, 36, 3, True),
    ])
    def test_trapped_boundary(self, evaluator_factory, width, head_x, area, trapped):
        # Body runs from the head back to the left wall on a one-row board
        body = [(x, 0) for x in range(head_x, -1, -1)]
        evaluation = evaluator_factory(body, width=width, height=1).evaluate_space_control()

        assert evaluation.area == area
        assert evaluation.is_trapped is trapped
