import re
from pathlib import Path

from solvers.dpll import Literal

FORMULA_RE = re.compile(r'\{[^{}]*\}(,\{[^{}]*\})*')
CLAUSE_RE = re.compile(r'\{([^{}]*)\}')


class FormulaSyntaxError(ValueError):
    pass


def _parse_literal(token):
    negated = token.startswith('-')
    name = token.lstrip('-')
    if not name or '-' in name:
        raise FormulaSyntaxError(f"invalid literal {token!r}")
    return Literal(name, negated)


def parse_formula(text):
    """Parse the brace notation, e.g. "{a,b},{-a,c}", into a list of clauses"""
    text = re.sub(r'\s+', '', text)
    if not text:
        return []
    if not FORMULA_RE.fullmatch(text):
        raise FormulaSyntaxError(f"malformed formula {text!r}")

    cnf = []
    for body in CLAUSE_RE.findall(text):
        if not body:
            cnf.append([])
            continue
        cnf.append([_parse_literal(token) for token in body.split(',')])
    return cnf


def read_cnf(path):
    clauses = []
    current = []
    with open(path) as f:
        for line in f:
            if line.startswith(('p', 'c', '%')):
                continue
            for lit in map(int, re.findall(r'-?\d+', line)):
                if lit == 0:
                    if current:
                        clauses.append(current)
                    current = []
                    continue
                literal = Literal(str(abs(lit)), lit < 0)
                if literal not in current:
                    current.append(literal)
    if current:
        clauses.append(current)
    return clauses


def read_formula(path):
    path = Path(path)
    if path.suffix == '.cnf':
        return read_cnf(path)
    return parse_formula(path.read_text())
