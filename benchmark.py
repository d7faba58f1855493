import os
import csv
import json
import atexit
import multiprocessing
from pathlib import Path
from statistics import mean

from utils.parser import read_cnf
from utils.timer import Timer
from utils.memory import MemoryTracker
from utils.formatting import evaluate

from solvers.dpll import DpllSolver
from solvers.brute_force import BruteForceSolver

TIMEOUT = 300
MAX_CONSECUTIVE_TIMEOUTS = 10
CNF_PATHS = sorted(Path("benchmarks").rglob("*.cnf"))

SOLVERS = {
    "dpll": DpllSolver,
    "brute": BruteForceSolver,
}

RESULTS_DIR = "results"
BACKUP_PATH = os.path.join(RESULTS_DIR, "backup.tmp")
CSV_HEADER = [
    "solver", "folder", "avg_time", "min_time", "max_time",
    "avg_mem", "min_mem", "max_mem", "inconclusive", "failed", "decisions"
]
stats = {}


def save_backup():
    if not os.path.isdir(RESULTS_DIR):
        return
    with open(BACKUP_PATH, "w") as f:
        json.dump(stats, f, indent=2)


def load_backup():
    global stats
    if os.path.exists(BACKUP_PATH):
        print(">> Resuming from previous backup...")
        try:
            with open(BACKUP_PATH, "r") as f:
                stats = json.load(f)
        except json.JSONDecodeError:
            print(">> Error loading backup file, starting fresh")
            stats = {}


def _run_instance(SolverClass, cnf):
    with MemoryTracker() as mem, Timer() as timer:
        solver = SolverClass(cnf)
        assignment, decisions = solver.solve()

    if assignment is not None and not evaluate(cnf, assignment):
        raise RuntimeError("solver returned a model that does not satisfy the formula")
    return assignment is not None, decisions, timer.elapsed, mem.min_usage, mem.avg_usage, mem.max_usage


def _worker(SolverClass, cnf, conn):
    try:
        conn.send((True, _run_instance(SolverClass, cnf)))
    except Exception as e:
        conn.send((False, f"{type(e).__name__}: {e}"))
    finally:
        conn.close()


def run_with_timeout(SolverClass, cnf, timeout=TIMEOUT):
    """Solve in a separate process, killing it if no result arrives in `timeout` seconds"""
    receiver, sender = multiprocessing.Pipe(duplex=False)
    process = multiprocessing.Process(target=_worker, args=(SolverClass, cnf, sender), daemon=True)
    process.start()
    sender.close()
    try:
        if not receiver.poll(timeout):
            raise TimeoutError(f"no result within {timeout}s")
        ok, payload = receiver.recv()
    finally:
        if process.is_alive():
            process.terminate()
        process.join()
        receiver.close()

    if not ok:
        raise RuntimeError(payload)
    return payload


def group_by_folder(paths):
    groups = {}
    for p in paths:
        groups.setdefault(p.parent.name, []).append(p)
    return groups


def get_next_csv_path(base_path):
    if not os.path.exists(base_path):
        return base_path
    index = 1
    while True:
        new_path = base_path.replace(".csv", f" ({index}).csv")
        if not os.path.exists(new_path):
            return new_path
        index += 1


def new_folder_stats():
    return {
        "times": [],
        "mems": [],
        "mem_min": float('inf'),
        "mem_max": float('-inf'),
        "inconclusive": 0,
        "failed": 0,
        "completed": False,
        "completed_tests": 0,
        "csv_ready_data": [],
        "consecutive_timeouts": 0,
        "decisions": 0
    }


def summary_row(label, folder, folder_stats, total_tests):
    avg_decs = folder_stats["decisions"] / total_tests if total_tests > 0 else 0
    return [
        label,
        folder,
        f"{mean(folder_stats['times']):.6f}",
        f"{min(folder_stats['times']):.6f}",
        f"{max(folder_stats['times']):.6f}",
        f"{mean(folder_stats['mems']):.2f}",
        f"{folder_stats['mem_min']:.2f}",
        f"{folder_stats['mem_max']:.2f}",
        folder_stats["inconclusive"],
        folder_stats["failed"],
        f"{avg_decs:.2f}"
    ]


def run_folder(label, SolverClass, folder, test_files, folder_stats):
    total_tests = len(test_files)
    start_idx = len(folder_stats["times"]) + folder_stats["inconclusive"] + folder_stats["failed"]
    if start_idx != folder_stats["completed_tests"]:
        print(f">> Adjusting start index from {folder_stats['completed_tests']} to {start_idx} based on actual data")
        folder_stats["completed_tests"] = start_idx

    for idx in range(start_idx, total_tests):
        path = test_files[idx]
        if folder_stats["consecutive_timeouts"] >= MAX_CONSECUTIVE_TIMEOUTS:
            print(f">> {MAX_CONSECUTIVE_TIMEOUTS}+ consecutive timeouts in {folder}, skipping remaining")
            folder_stats["inconclusive"] += total_tests - idx
            folder_stats["completed_tests"] = total_tests
            break

        cnf = read_cnf(path)

        decs = 0
        t_elapsed = 0.0
        mem_used = 0.0
        try:
            sat, decs, t_elapsed, min_mem, mem_used, max_mem = run_with_timeout(SolverClass, cnf)
            folder_stats["decisions"] += decs
            folder_stats["times"].append(t_elapsed)
            folder_stats["mems"].append(mem_used)
            folder_stats["mem_min"] = min(folder_stats["mem_min"], min_mem)
            folder_stats["mem_max"] = max(folder_stats["mem_max"], max_mem)
            folder_stats["consecutive_timeouts"] = 0
            status = f"SAT? {sat}"
        except TimeoutError:
            folder_stats["inconclusive"] += 1
            folder_stats["consecutive_timeouts"] += 1
            status = "TIMEOUT"
        except Exception as e:
            folder_stats["failed"] += 1
            folder_stats["consecutive_timeouts"] = 0
            status = f"ERROR: {e}"
        folder_stats["completed_tests"] = idx + 1

        print(f"{folder:10} {path.name:25} {status:<12} "
              f"Time: {t_elapsed:9.6f}s Mem(avg): {mem_used:9.2f}KB "
              f"Decisions: {decs:<8} (Consecutive TOs: {folder_stats['consecutive_timeouts']})")

        save_backup()


def benchmark_all(solvers=None, paths=None):
    global stats
    solvers = SOLVERS if solvers is None else solvers
    paths = CNF_PATHS if paths is None else paths

    os.makedirs(RESULTS_DIR, exist_ok=True)
    folder_groups = group_by_folder(paths)

    load_backup()

    csv_path = get_next_csv_path(os.path.join(RESULTS_DIR, "benchmark.csv"))
    print(f">> Results will be written to: {csv_path}")

    with open(csv_path, "w", newline="") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(CSV_HEADER)

        # rows finished before a restart
        for folder_data in stats.values():
            for data in folder_data.values():
                for row in data.get("csv_ready_data", []):
                    writer.writerow(row)
        csvfile.flush()

        for label, SolverClass in solvers.items():
            print(f"\n=== {label.upper()} ===")
            solver_stats = stats.setdefault(label, {})

            for folder, test_files in folder_groups.items():
                folder_stats = solver_stats.setdefault(folder, new_folder_stats())
                if folder_stats["completed"]:
                    print(f">> Skipping completed: {label} - {folder}")
                    continue

                run_folder(label, SolverClass, folder, test_files, folder_stats)

                total_tests = len(test_files)
                if folder_stats["completed_tests"] == total_tests:
                    folder_stats["completed"] = True
                    if folder_stats["times"]:
                        csv_row = summary_row(label, folder, folder_stats, total_tests)
                        writer.writerow(csv_row)
                        csvfile.flush()
                        folder_stats["csv_ready_data"].append(csv_row)
                    save_backup()

    return stats


def print_summary(stats):
    for label, folder_data in stats.items():
        print(f"\n--- Summary for {label.upper()} ---")
        print(f"{'Folder':15} {'AVG(s)':>10} {'MIN(s)':>10} {'MAX(s)':>10} "
              f"{'AVG(KB)':>10} {'MIN(KB)':>10} {'MAX(KB)':>10} "
              f"{'INC':>4} {'FAIL':>5} {'AVG DEC':>10}")

        for folder, data in folder_data.items():
            if data.get("csv_ready_data"):
                row = data["csv_ready_data"][0]
                print(f"{folder:15} {row[2]:>10} {row[3]:>10} {row[4]:>10} "
                      f"{row[5]:>10} {row[6]:>10} {row[7]:>10} "
                      f"{row[8]:>4} {row[9]:>5} {row[10]:>10}")
            else:
                avg_decs = data["decisions"] / data["completed_tests"] if data["completed_tests"] > 0 else 0
                print(f"{folder:15} {'-':>10} {'-':>10} {'-':>10} "
                      f"{'-':>10} {'-':>10} {'-':>10} "
                      f"{data.get('inconclusive', 0):4d} {data.get('failed', 0):5d} {avg_decs:10.2f}")


atexit.register(save_backup)

if __name__ == "__main__":
    try:
        stats = benchmark_all()
    finally:
        save_backup()
    print_summary(stats)
