"""Acceptance ratio vs utilisation experiment.

Generates random rate-monotonic service sets at various utilisation levels
using UUniFast, runs the completion time, scheduling point and RM LUB tests
on each, and plots the fraction of sets each test accepts.
"""

import argparse
from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt

from feasibility.analysis import least_upper_bound
from feasibility.logger import configure_logger
from feasibility.sweep import run_sweep

LABELS = {
    "completion_time": ("Completion time (exact)", "bo-"),
    "scheduling_point": ("Scheduling point (exact)", "gx--"),
    "rm_lub": ("RM LUB", "rs-"),
}


def plot_acceptance_vs_utilisation(
    results: dict,
    num_services: int,
    output_path: str = "results/acceptance_vs_utilisation.png",
) -> None:
    """Plot acceptance ratio per test vs utilisation.

    Args:
        results: Dictionary mapping utilisation -> {test name -> ratio}.
        num_services: Services per set, used to mark the LUB.
        output_path: Path to save the plot.
    """
    output_dir = Path(output_path).parent
    output_dir.mkdir(parents=True, exist_ok=True)

    utilisations = sorted(results.keys())

    plt.figure(figsize=(10, 6))
    for name, (label, style) in LABELS.items():
        ratios = [results[u][name] for u in utilisations]
        plt.plot(utilisations, ratios, style, linewidth=2, markersize=8, label=label)
    plt.axvline(least_upper_bound(num_services), color='gray', linestyle=':',
                label=f"LUB({num_services})")
    plt.xlabel('Total Utilisation', fontsize=12)
    plt.ylabel('Acceptance Ratio', fontsize=12)
    plt.title('Feasibility Test Acceptance vs Utilisation (RM, T=D)', fontsize=14)
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.xlim(0, 1.05)
    plt.ylim(0, 1.05)

    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close()

    print(f"Plot saved to {output_path}")


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--sets", type=int, default=150, help="Service sets per utilisation point")
    parser.add_argument("--services", type=int, default=5, help="Services per set")
    parser.add_argument("--workers", type=int, default=None, help="Process pool size")
    parser.add_argument("--output", default="results/acceptance_vs_utilisation.png")
    args = parser.parse_args()

    configure_logger(level="INFO")
    print("Running acceptance vs utilisation experiment...")

    utilisation_points = [u / 20.0 for u in range(2, 21)]  # 0.10, 0.15, ..., 1.0

    results = run_sweep(
        utilisation_points=utilisation_points,
        num_sets_per_point=args.sets,
        num_services=args.services,
        period_min=10,
        period_max=1000,
        seed=42,
        max_workers=args.workers,
    )

    print("\nResults:")
    for u, ratios in sorted(results.items()):
        cells = ", ".join(f"{name}={ratio:.3f}" for name, ratio in ratios.items())
        print(f"  U = {u:.2f}: {cells}")

    plot_acceptance_vs_utilisation(results, args.services, args.output)

    print("\nExperiment complete!")


if __name__ == "__main__":
    main()
