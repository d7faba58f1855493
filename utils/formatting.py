def format_literal(lit):
    return f"-{lit.name}" if lit.negated else lit.name


def format_clause(clause):
    return "{" + ",".join(format_literal(lit) for lit in clause) + "}"


def format_cnf(cnf):
    return ",".join(format_clause(clause) for clause in cnf)


def format_assignment(assignment):
    return " ".join(f"{name}={int(value)}" for name, value in sorted(assignment.items()))


def format_result(assignment):
    if assignment is None:
        return "UNSAT"
    return f"SAT: {format_assignment(assignment)}".rstrip()


def evaluate(cnf, assignment):
    """True iff every clause holds a literal made true by `assignment`"""
    return all(
        any(lit.evaluate(assignment) is True for lit in clause)
        for clause in cnf
    )
