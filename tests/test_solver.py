"""
Tests for MatrixGameSolver (iteration dispatch, accumulators, exploitability).

Run with: pytest tests/test_solver.py -v
"""

import pytest
import numpy as np

from matrix_nash_cfr.engine.backend import get_backend
from matrix_nash_cfr.engine.ops import regret_match
from matrix_nash_cfr.games.classic import matching_pennies, biased_matching_pennies
from matrix_nash_cfr.games.random_matrix import random_payoff_table
from matrix_nash_cfr.solvers import Algorithm, MatrixGameSolver, create, parse_algorithm


ALL_ALGORITHMS = list(Algorithm)


@pytest.fixture
def solver():
    return create(5, np.random.default_rng(11))


class TestSolverBasic:
    """Basic tests for the solver."""

    def test_initialization(self, solver):
        assert solver.iteration_count == 0
        assert solver.size == 5

    def test_create_rejects_empty_game(self):
        with pytest.raises(ValueError):
            create(0, np.random.default_rng(0))

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_single_iteration(self, solver, algorithm):
        solver.iteration(algorithm)
        assert solver.iteration_count == 1

    def test_counter_increments_once_per_iteration(self, solver):
        """One increment per iteration() call, not per player."""
        solver.iterate(Algorithm.CFR, 7)
        assert solver.iteration_count == 7

    def test_accepts_integer_and_name(self, solver):
        solver.iteration(0)
        solver.iteration("cfr")
        solver.iteration("CFR+")
        assert solver.iteration_count == 3

    def test_shortcuts(self, solver):
        solver.fictitious_play()
        solver.cfr()
        solver.cfr_plus()
        assert solver.iteration_count == 3

    def test_unknown_algorithm_raises(self, solver):
        with pytest.raises(ValueError, match="Unknown algorithm"):
            solver.iteration(3)
        assert solver.iteration_count == 0

    def test_invalid_player_raises(self, solver):
        with pytest.raises(ValueError):
            solver.average_strategy(2)

    def test_accessors_return_copies(self, solver):
        solver.cfr()
        regret = solver.cumulative_regret(0)
        regret[:] = 100.0
        assert not np.any(solver.cumulative_regret(0) == 100.0)

    def test_print_strategy(self, solver, capsys):
        solver.iterate(Algorithm.CFR_PLUS, 3)
        solver.print_strategy(max_actions=2)
        out = capsys.readouterr().out
        assert "after 3 iterations" in out
        assert "P1:" in out and "P2:" in out
        assert "(3 more)" in out


class TestParseAlgorithm:
    @pytest.mark.parametrize("value,expected", [
        (0, Algorithm.FICTITIOUS_PLAY),
        ("1", Algorithm.CFR),
        ("cfr+", Algorithm.CFR_PLUS),
        ("Fictitious-Play", Algorithm.FICTITIOUS_PLAY),
        (Algorithm.CFR, Algorithm.CFR),
    ])
    def test_parse(self, value, expected):
        assert parse_algorithm(value) is expected

    @pytest.mark.parametrize("value", [-1, 3, "7", "regret"])
    def test_parse_rejects_unknown(self, value):
        with pytest.raises(ValueError):
            parse_algorithm(value)

    def test_display_names(self):
        assert [a.display_name for a in Algorithm] == ["Fictitious play", "CFR", "CFR+"]


class TestFreshInstance:
    """Before any iteration every strategy is uniform."""

    def test_uniform_strategies(self, solver):
        for player in (0, 1):
            np.testing.assert_array_equal(solver.average_strategy(player), np.full(5, 0.2))
            np.testing.assert_array_equal(solver.current_strategy(player), np.full(5, 0.2))

    def test_zero_accumulators(self, solver):
        for player in (0, 1):
            assert np.all(solver.strategy_sum(player) == 0)
            assert np.all(solver.cumulative_regret(player) == 0)

    def test_exploitability_of_uniform_profile(self):
        """Biased pennies: BR_1 = 0.25, BR_2 = 0 against uniform."""
        solver = MatrixGameSolver(biased_matching_pennies())
        assert solver.best_response_value(0) == pytest.approx(0.25)
        assert solver.best_response_value(1) == pytest.approx(0.0)
        assert solver.exploitability() == pytest.approx(0.125)


class TestStrategyInvariants:
    """Properties that hold for every algorithm at every iteration."""

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_strategies_are_distributions(self, algorithm):
        solver = create(6, np.random.default_rng(21))
        for _ in range(60):
            solver.iteration(algorithm)
            for player in (0, 1):
                for strategy in (solver.average_strategy(player), solver.current_strategy(player)):
                    assert strategy.shape == (6,)
                    assert np.all(strategy >= 0)
                    assert abs(strategy.sum() - 1.0) < 1e-9

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_strategy_sums_nondecreasing(self, algorithm):
        solver = create(6, np.random.default_rng(22))
        previous = [solver.strategy_sum(0), solver.strategy_sum(1)]
        for _ in range(60):
            solver.iteration(algorithm)
            for player in (0, 1):
                current = solver.strategy_sum(player)
                assert np.all(current >= previous[player])
                previous[player] = current

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_exploitability_nonnegative(self, algorithm):
        solver = create(6, np.random.default_rng(23))
        for _ in range(60):
            solver.iteration(algorithm)
            assert solver.exploitability() >= -1e-12

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_debug_invariant_checks_pass(self, algorithm):
        table = random_payoff_table(6, np.random.default_rng(24))
        solver = MatrixGameSolver(table, check_invariants=True)
        solver.iterate(algorithm, 100)
        assert solver.iteration_count == 100

    def test_debug_checks_validate_zero_sum(self, monkeypatch):
        import matrix_nash_cfr.solvers.matrix_game as matrix_game

        checked = []
        monkeypatch.setattr(matrix_game, "validate_zero_sum", checked.append)
        table = random_payoff_table(4, np.random.default_rng(25))

        MatrixGameSolver(table)
        assert checked == []

        solver = MatrixGameSolver(table, check_invariants=True)
        assert checked == [solver.matrices]

    def test_player_matrices_come_from_builder(self, solver):
        for player in (0, 1):
            np.testing.assert_array_equal(
                solver.backend.asnumpy(solver._A[player]),
                solver.matrices.for_player(player),
            )


class TestDeterminism:
    """Identical seeds and calls give bit-identical results."""

    @pytest.mark.parametrize("algorithm", ALL_ALGORITHMS)
    def test_same_seed_same_exploitability_sequence(self, algorithm):
        s1 = create(8, np.random.default_rng(1234))
        s2 = create(8, np.random.default_rng(1234))

        seq1, seq2 = [], []
        for _ in range(50):
            s1.iteration(algorithm)
            s2.iteration(algorithm)
            seq1.append(s1.exploitability())
            seq2.append(s2.exploitability())

        assert seq1 == seq2

    def test_mixed_algorithm_sequence(self):
        calls = [0, 1, 2, 2, 1, 0, 2] * 5
        s1 = create(4, np.random.default_rng(9))
        s2 = create(4, np.random.default_rng(9))
        for algorithm in calls:
            s1.iteration(algorithm)
            s2.iteration(algorithm)
        assert s1.exploitability() == s2.exploitability()
        np.testing.assert_array_equal(s1.strategy_sum(1), s2.strategy_sum(1))


class TestVanillaCFR:
    """CFR-specific update semantics."""

    def test_regrets_can_go_negative(self, solver):
        solver.cfr()
        assert np.any(solver.cumulative_regret(0) < 0)

    def test_first_iteration_uniform_averaging(self, solver):
        """Strategy sums grow by the current strategy with weight 1."""
        solver.cfr()
        np.testing.assert_array_equal(solver.strategy_sum(0), np.full(5, 0.2))

    def test_player_2_sees_player_1_update(self):
        """P2's update in iteration t reads P1's regrets after P1's update in t."""
        table = random_payoff_table(4, np.random.default_rng(77))
        solver = MatrixGameSolver(table)
        solver.cfr()

        backend = get_backend('numpy')
        uniform = np.full(4, 0.25)
        A2 = -table.entries.T

        opponent = regret_match(solver.cumulative_regret(0), backend)
        values = A2 @ opponent
        expected = values - np.dot(uniform, values)

        np.testing.assert_allclose(solver.cumulative_regret(1), expected, rtol=1e-12, atol=1e-12)

    def test_regret_update_against_current_strategies(self):
        """P1's first regret is A^(1) @ uniform minus its mean."""
        table = random_payoff_table(3, np.random.default_rng(78))
        solver = MatrixGameSolver(table)
        solver.cfr()

        values = table.entries @ np.full(3, 1 / 3)
        expected = values - values.mean()
        np.testing.assert_allclose(solver.cumulative_regret(0), expected, atol=1e-12)


class TestSolve:
    def test_solve_stops_at_epsilon(self):
        solver = create(5, np.random.default_rng(31))
        exploitability = solver.solve(Algorithm.CFR_PLUS, epsilon=1e-3, max_iterations=20000)
        assert exploitability <= 1e-3
        assert exploitability == solver.exploitability()

    def test_solve_respects_iteration_limit(self):
        solver = create(5, np.random.default_rng(32))
        solver.solve(Algorithm.CFR, epsilon=1e-12, max_iterations=10)
        assert solver.iteration_count == 10

    def test_solve_runs_at_least_once(self):
        solver = MatrixGameSolver(matching_pennies())
        assert solver.solve(Algorithm.CFR_PLUS, epsilon=1.0) == 0.0
        assert solver.iteration_count == 1

    def test_single_action_game(self):
        solver = create(1, np.random.default_rng(0))
        solver.solve(Algorithm.CFR, epsilon=1e-12)
        assert solver.iteration_count == 1
        assert solver.exploitability() == 0.0
        np.testing.assert_array_equal(solver.average_strategy(0), [1.0])
