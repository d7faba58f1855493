import copy
import random

import pytest

from solvers.dpll import (
    Literal, SearchStats, DpllSolver,
    simplify, unit_propagate, select_literal, dpll, variables,
)
from solvers.brute_force import BruteForceSolver
from utils.formatting import evaluate
from utils.parser import parse_formula


def test_literal_rejects_empty_name():
    with pytest.raises(ValueError):
        Literal("")


def test_literal_evaluate_and_negation():
    a, not_a = Literal("a"), Literal("a", True)
    assert -a == not_a
    assert a.evaluate({"a": True}) is True
    assert not_a.evaluate({"a": True}) is False
    assert not_a.evaluate({"a": False}) is True
    assert a.evaluate({}) is None


def test_simplify_drops_satisfied_clauses_and_false_literals():
    cnf = parse_formula("{a,b},{-a,c},{d}")
    assert simplify(cnf, {"a": True}) == [[Literal("c")], [Literal("d")]]


def test_simplify_reports_emptied_clause():
    assert simplify(parse_formula("{a},{b}"), {"a": False}) is None


def test_simplify_keeps_empty_clause_as_conflict():
    assert simplify([[]], {}) is None


def test_simplify_is_idempotent():
    cnf = parse_formula("{a,b,c},{-a,d},{-b,-d},{c,e}")
    assignment = {"a": True, "e": False}
    once = simplify(cnf, assignment)
    assert simplify(once, assignment) == once


def test_simplify_does_not_touch_input():
    cnf = parse_formula("{a,b},{-a,c}")
    before = copy.deepcopy(cnf)
    simplify(cnf, {"a": True})
    assert cnf == before


def test_unit_propagate_reaches_fixed_point():
    assignment = {}
    cnf = unit_propagate(parse_formula("{a},{-a,b},{-b,c},{c,d,e}"), assignment)
    assert cnf == []
    assert assignment == {"a": True, "b": True, "c": True}


def test_unit_propagate_leaves_non_units():
    assignment = {}
    cnf = unit_propagate(parse_formula("{-a},{a,b,c},{d,e}"), assignment)
    assert assignment == {"a": False}
    assert cnf == parse_formula("{b,c},{d,e}")


@pytest.mark.parametrize("formula, assignment", [
    ("{a},{-a}", {}),
    ("{a},{-a,b},{-b}", {}),
    ("{a}", {"a": False}),
])
def test_unit_propagate_conflict(formula, assignment):
    assert unit_propagate(parse_formula(formula), dict(assignment)) is None


def test_unit_propagate_counts_resolutions():
    stats = SearchStats()
    unit_propagate(parse_formula("{a},{-a,b}"), {}, stats)
    assert stats.propagations == 2


def test_select_literal_is_positional():
    cnf = parse_formula("{a,b},{c}")
    assert select_literal(cnf, {}) == Literal("a")
    assert select_literal(cnf, {"a": False}) == Literal("b")
    assert select_literal(cnf, {"a": False, "b": True, "c": True}) is None


@pytest.mark.parametrize("formula, expected", [
    ("{a}", {"a": True}),
    ("{a},{-a}", None),
    ("{a,b}", {"a": True}),
    ("{a,b},{-a,c},{-b,-c}", {"a": True, "c": True, "b": False}),
    ("{a,b},{-a,b},{a,-b},{-a,-b}", None),
    ("", {}),
    ("{}", None),
    ("{-a,-b},{a}", {"a": True, "b": False}),
])
def test_dpll_scenarios(formula, expected):
    assert dpll(parse_formula(formula), {}) == expected


def test_empty_formula_is_satisfiable_with_empty_assignment():
    result = dpll([], {})
    assert result is not None
    assert result == {}


def test_dpll_extends_given_assignment_without_mutating_it():
    given = {"a": False}
    assert dpll(parse_formula("{a,b}"), given) == {"a": False, "b": True}
    assert given == {"a": False}


def test_dpll_does_not_mutate_formula():
    cnf = parse_formula("{a,b},{-a,c},{-b,-c},{c,d}")
    before = copy.deepcopy(cnf)
    dpll(cnf, {})
    assert cnf == before


def test_dpll_is_deterministic():
    cnf = parse_formula("{a,b,c},{-a,-b},{-b,-c},{-a,-c},{b,d},{-d,a}")
    first = dpll(cnf, {})
    for _ in range(5):
        assert dpll(cnf, {}) == first


def test_dpll_stats_on_unsatisfiable_formula():
    stats = SearchStats()
    assert dpll(parse_formula("{a,b},{-a,b},{a,-b},{-a,-b}"), {}, stats) is None
    assert stats.decisions == 1
    assert stats.conflicts == 3


def random_cnf(rng, max_vars=6, max_clauses=14):
    names = [f"x{i}" for i in range(rng.randint(1, max_vars))]
    cnf = []
    for _ in range(rng.randint(1, max_clauses)):
        width = rng.randint(1, 3)
        cnf.append([Literal(rng.choice(names), rng.random() < 0.5) for _ in range(width)])
    return cnf


def test_agrees_with_brute_force_on_random_formulas():
    rng = random.Random(1234)
    for _ in range(300):
        cnf = random_cnf(rng)
        result = dpll(cnf, {})
        reference, _ = BruteForceSolver(cnf).solve()

        assert (result is None) == (reference is None), cnf
        if result is not None:
            assert evaluate(cnf, result)
            assert set(result) <= set(variables(cnf))


def test_solver_returns_model_and_decisions():
    solver = DpllSolver(parse_formula("{a,b},{-a,c},{-b,-c}"))
    assignment, decisions = solver.solve()
    assert assignment == {"a": True, "c": True, "b": False}
    assert decisions == 1
    assert solver.stats.propagations == 2


def test_solver_copies_clauses():
    cnf = parse_formula("{a,b}")
    solver = DpllSolver(cnf)
    cnf[0].clear()
    assert solver.solve()[0] == {"a": True}


def test_dpll_searches_deeper_than_default_recursion_limit():
    cnf = [[Literal(f"x{i}"), Literal(f"y{i}")] for i in range(1100)]
    stats = SearchStats()
    assignment = dpll(cnf, {}, stats)
    assert stats.decisions == 1100
    assert evaluate(cnf, assignment)
