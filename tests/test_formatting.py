from solvers.dpll import Literal
from utils.formatting import (
    format_assignment, format_clause, format_cnf, format_literal, format_result, evaluate,
)
from utils.parser import parse_formula


def test_format_literal():
    assert format_literal(Literal("a")) == "a"
    assert format_literal(Literal("a", True)) == "-a"


def test_format_cnf_matches_parser_notation():
    text = "{a,-b},{c},{}"
    assert format_cnf(parse_formula(text)) == text
    assert format_clause([]) == "{}"


def test_format_assignment_sorted():
    assert format_assignment({"b": False, "a": True}) == "a=1 b=0"


def test_format_result():
    assert format_result(None) == "UNSAT"
    assert format_result({"a": True}) == "SAT: a=1"
    assert format_result({}) == "SAT:"


def test_evaluate():
    cnf = parse_formula("{a,b},{-a,c}")
    assert evaluate(cnf, {"a": True, "c": True})
    assert not evaluate(cnf, {"a": True, "c": False})
    assert not evaluate(cnf, {"a": True})
    assert evaluate([], {})
    assert not evaluate([[]], {"a": True})
