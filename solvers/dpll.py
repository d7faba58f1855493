import sys
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Literal:
    """A propositional variable, possibly negated"""
    name: str
    negated: bool = False

    def __post_init__(self):
        if not self.name:
            raise ValueError("literal name must not be empty")

    @property
    def value_for_satisfaction(self) -> bool:
        return not self.negated

    def evaluate(self, assignment: "Assignment") -> Optional[bool]:
        """True/False under the assignment, None while the variable is unassigned"""
        value = assignment.get(self.name)
        if value is None:
            return None
        return value == self.value_for_satisfaction

    def __neg__(self) -> "Literal":
        return Literal(self.name, not self.negated)


Clause = List[Literal]
CNF = List[Clause]
Assignment = Dict[str, bool]


@dataclass
class SearchStats:
    decisions: int = 0     # branch points entered
    propagations: int = 0  # unit clauses resolved
    conflicts: int = 0     # search nodes that failed


def simplify(cnf: CNF, assignment: Assignment) -> Optional[CNF]:
    """Drop satisfied clauses and falsified literals; None if a clause empties"""
    new_cnf = []
    for clause in cnf:
        if any(lit.evaluate(assignment) is True for lit in clause):
            continue
        new_clause = [lit for lit in clause if lit.evaluate(assignment) is None]
        if not new_clause:
            return None
        new_cnf.append(new_clause)
    return new_cnf


def _first_unit(cnf: CNF) -> Optional[Literal]:
    for clause in cnf:
        if len(clause) == 1:
            return clause[0]
    return None


def unit_propagate(cnf: CNF, assignment: Assignment,
                   stats: Optional[SearchStats] = None) -> Optional[CNF]:
    """
    Resolve unit clauses until none remain. New entries are written into
    `assignment`, so callers pass a copy owned by the current branch.
    Returns the simplified CNF, or None on the first contradiction.
    """
    while True:
        cnf = simplify(cnf, assignment)
        if cnf is None:
            return None

        unit = _first_unit(cnf)
        if unit is None:
            return cnf

        required = unit.value_for_satisfaction
        existing = assignment.get(unit.name)
        if existing is not None and existing != required:
            return None
        assignment[unit.name] = required
        if stats is not None:
            stats.propagations += 1


def select_literal(cnf: CNF, assignment: Assignment) -> Optional[Literal]:
    # positional on purpose: the first unassigned literal in scan order
    for clause in cnf:
        for lit in clause:
            if lit.name not in assignment:
                return lit
    return None


def _search(cnf: CNF, assignment: Assignment, stats: SearchStats) -> Optional[Assignment]:
    cnf = unit_propagate(cnf, assignment, stats)
    if cnf is None:
        stats.conflicts += 1
        return None

    if not cnf:
        return assignment
    if any(not clause for clause in cnf):
        stats.conflicts += 1
        return None

    lit = select_literal(cnf, assignment)
    if lit is None:
        # unreachable after a successful propagation
        stats.conflicts += 1
        return None

    stats.decisions += 1
    for value in (True, False):
        branch = dict(assignment)
        branch[lit.name] = value
        result = _search(cnf, branch, stats)
        if result is not None:
            return result

    stats.conflicts += 1
    return None


def dpll(cnf: CNF, assignment: Optional[Assignment] = None,
         stats: Optional[SearchStats] = None) -> Optional[Assignment]:
    """
    Decide satisfiability of `cnf` extending `assignment`.

    Returns a satisfying assignment (possibly empty) or None when the formula
    is unsatisfiable. `cnf` and `assignment` are left unchanged.
    """
    if stats is None:
        stats = SearchStats()

    # one stack frame per decision, plus headroom for the caller
    depth = len(variables(cnf)) + 1000
    if depth > sys.getrecursionlimit():
        sys.setrecursionlimit(depth)

    return _search(cnf, dict(assignment or {}), stats)


def variables(cnf: CNF) -> List[str]:
    seen = {}
    for clause in cnf:
        for lit in clause:
            seen.setdefault(lit.name, None)
    return list(seen)


class DpllSolver:
    def __init__(self, cnf):
        self.cnf = [list(clause) for clause in cnf]
        self.assignment = None
        self.stats = SearchStats()

    def solve(self):
        self.stats = SearchStats()
        self.assignment = dpll(self.cnf, {}, self.stats)
        return self.assignment, self.stats.decisions
