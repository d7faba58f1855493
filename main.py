import argparse
import sys

from utils.parser import parse_formula, read_formula
from utils.formatting import format_result, evaluate
from solvers.dpll import DpllSolver
from solvers.brute_force import BruteForceSolver

SOLVERS = {
    "dpll": DpllSolver,
    "brute": BruteForceSolver,
}

EXIT_SAT = 10
EXIT_UNSAT = 20


def build_parser():
    parser = argparse.ArgumentParser(description="A DPLL SAT solver")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("formula", nargs="?", help='Formula in brace notation, e.g. "{a,b},{-a,c}"')
    source.add_argument("--file", help="Path to a DIMACS .cnf file or a brace-notation text file")
    parser.add_argument("--solver", choices=sorted(SOLVERS), default="dpll")
    parser.add_argument("--stats", action="store_true", help="Print search counters")
    parser.add_argument("--verify", action="store_true", help="Check the model against the input")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        cnf = read_formula(args.file) if args.file else parse_formula(args.formula)
    except (ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    solver = SOLVERS[args.solver](cnf)
    assignment, count = solver.solve()
    print(format_result(assignment))

    if args.stats:
        if args.solver == "dpll":
            stats = solver.stats
            print(f"decisions={stats.decisions} propagations={stats.propagations} "
                  f"conflicts={stats.conflicts}")
        else:
            print(f"checked={count}")

    if args.verify and assignment is not None:
        print(f"verified: {evaluate(cnf, assignment)}")

    return EXIT_SAT if assignment is not None else EXIT_UNSAT


if __name__ == "__main__":
    sys.exit(main())
