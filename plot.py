import os
import sys

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.ticker import LogLocator, ScalarFormatter

NUMERIC_COLUMNS = [
    "avg_time", "min_time", "max_time",
    "avg_mem", "min_mem", "max_mem", "decisions",
]
MAX_INCONCLUSIVE = 25


def load_results(csv_path):
    df = pd.read_csv(csv_path)
    # folders where most instances timed out say nothing about the solver
    df = df[df["inconclusive"] <= MAX_INCONCLUSIVE].copy()
    for column in NUMERIC_COLUMNS:
        df[column] = pd.to_numeric(df[column], errors='coerce')
    return df


def _log_axis(ax, numticks=12):
    ax.set_yscale('log')
    ax.yaxis.set_major_locator(LogLocator(base=10, numticks=numticks))
    ax.yaxis.set_minor_locator(LogLocator(base=10, subs=np.arange(2, 10) * 0.1, numticks=numticks))
    ax.yaxis.set_major_formatter(ScalarFormatter())
    ax.yaxis.grid(True, which='both', linestyle='--', alpha=0.3)


def bar_with_range(data, avg, low, high, color, ylabel, title, out_path):
    """Log-scale bar chart of `avg` per solver with min/max whiskers"""
    data = data.sort_values(avg)
    fig, ax = plt.subplots(figsize=(12, 7))

    ax.bar(data.index, data[avg], color=color, label=ylabel)
    if low and high:
        yerr = [data[avg] - data[low], data[high] - data[avg]]
        ax.errorbar(data.index, data[avg], yerr=yerr, fmt='none', ecolor='black',
                    capsize=5, linewidth=1, label="Min/Max Range")

    ax.set_ylabel(ylabel)
    ax.set_title(title)
    _log_axis(ax)

    plt.setp(ax.get_xticklabels(), rotation=45, ha='right')
    ax.legend(loc='upper left')
    fig.tight_layout()
    fig.savefig(out_path)
    plt.close(fig)
    return out_path


def plot_results(csv_path, out_dir="results"):
    df = load_results(csv_path)
    os.makedirs(out_dir, exist_ok=True)
    written = []

    per_solver = df.groupby("solver").agg({
        "avg_time": "mean", "min_time": "min", "max_time": "max",
        "avg_mem": "mean", "min_mem": "min", "max_mem": "max",
        "decisions": "mean",
    })
    written.append(bar_with_range(
        per_solver, "avg_time", "min_time", "max_time", "skyblue",
        "Average Time (s)", "Average Execution Time per Solver",
        os.path.join(out_dir, "avg_time_log.png")))
    written.append(bar_with_range(
        per_solver, "avg_mem", "min_mem", "max_mem", "salmon",
        "Average Memory (KB)", "Average Memory Usage per Solver",
        os.path.join(out_dir, "avg_memory_log.png")))
    written.append(bar_with_range(
        per_solver, "decisions", None, None, "lightgreen",
        "Average Decisions", "Average Number of Decisions per Solver",
        os.path.join(out_dir, "avg_decisions_log.png")))

    for folder, sub_df in df.groupby("folder"):
        sub_df = sub_df.set_index("solver")
        written.append(bar_with_range(
            sub_df, "avg_time", "min_time", "max_time", "mediumseagreen",
            "Average Time (s)", f"Avg Time - Folder: {folder}",
            os.path.join(out_dir, f"avg_time_{folder}_log.png")))
        written.append(bar_with_range(
            sub_df, "decisions", None, None, "orchid",
            "Average Decisions", f"Avg Decisions - Folder: {folder}",
            os.path.join(out_dir, f"avg_decisions_{folder}_log.png")))

    pivot_df = df.pivot(index='solver', columns='folder', values='avg_time')
    pivot_df = pivot_df.reindex(per_solver["avg_time"].sort_values().index)
    ax = pivot_df.plot(kind='bar', figsize=(14, 8), logy=True)
    ax.set_ylabel('Average Time (s) - Log Scale')
    ax.set_title('Solver Performance Comparison by Benchmark Folder')
    _log_axis(ax, numticks=15)
    plt.setp(ax.get_xticklabels(), rotation=45, ha='right')
    ax.figure.tight_layout()
    comparison = os.path.join(out_dir, "solver_comparison_log.png")
    ax.figure.savefig(comparison)
    plt.close(ax.figure)
    written.append(comparison)

    return written


if __name__ == "__main__":
    plot_results(sys.argv[1] if len(sys.argv) > 1 else "results/benchmark.csv")
