from itertools import product

from solvers.dpll import variables


class BruteForceSolver:
    """Truth-table enumeration, only usable on small instances"""

    def __init__(self, cnf):
        self.cnf = [list(clause) for clause in cnf]
        self.names = sorted(variables(self.cnf))
        self.checked = 0

    def _satisfies(self, assignment):
        return all(
            any(assignment[lit.name] == (not lit.negated) for lit in clause)
            for clause in self.cnf
        )

    def solve(self):
        self.checked = 0
        if any(not clause for clause in self.cnf):
            return None, self.checked

        for values in product([True, False], repeat=len(self.names)):
            assignment = dict(zip(self.names, values))
            self.checked += 1
            if self._satisfies(assignment):
                return assignment, self.checked

        return None, self.checked
