import csv
import logging
import math
import re
import time
from pathlib import Path

import numpy as np

from pathsmooth import FemWeights, OsqpSettings, compute_path_profile, smooth_path

try:
    import matplotlib.pyplot as plt
except ImportError:  # matplotlib is optional
    plt = None


def make_noisy_sine(num_points: int = 60, noise: float = 0.12, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    x = np.linspace(0.0, 15.0, num_points)
    y = 1.5 * np.sin(x / 2.5)
    return np.column_stack((x, y)) + rng.normal(0.0, noise, size=(num_points, 2))


def make_noisy_turn(num_points: int = 40, radius: float = 6.0, noise: float = 0.1, seed: int = 1) -> np.ndarray:
    rng = np.random.default_rng(seed)
    t = np.linspace(0.0, math.pi / 2.0, num_points)
    xy = np.column_stack((radius * np.sin(t), radius * (1.0 - np.cos(t))))
    return xy + rng.normal(0.0, noise, size=xy.shape)


def path_length(xy: np.ndarray) -> float:
    return float(np.sum(np.hypot(np.diff(xy[:, 0]), np.diff(xy[:, 1]))))


def scenario_slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


def plot_paths(name: str, raw: np.ndarray, smoothed: np.ndarray, bound: float, out_dir: Path):
    if plt is None or smoothed.size == 0:
        return None
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(raw[:, 0], raw[:, 1], "o", markersize=3, color="gray", label="raw")
    for px, py in raw:
        ax.add_patch(plt.Rectangle((px - bound, py - bound), 2 * bound, 2 * bound, fill=False, lw=0.3, color="gray"))
    ax.plot(smoothed[:, 0], smoothed[:, 1], linewidth=2, label="smoothed")
    ax.set_aspect("equal")
    ax.set_title(name)
    ax.legend(loc="best")
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{scenario_slug(name)}.png"
    fig.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return out_path


def run_scenario(name: str, raw: np.ndarray, bound: float, results: list, plot_dir: Path):
    weights = FemWeights(smooth=1.0e4, path_length=1.0, ref_deviation=1.0)
    settings = OsqpSettings(max_iter=4000, time_limit=0.5)

    print(f"\n=== Scenario: {name} ===")
    t0 = time.time()
    smoothed, info = smooth_path(raw, bound, weights=weights, settings=settings)
    wall = time.time() - t0
    success = bool(info["success"])
    row = {
        "scenario": name,
        "success": success,
        "points": raw.shape[0],
        "raw_length": path_length(raw),
        "smoothed_length": path_length(smoothed) if success else 0.0,
        "max_abs_kappa": 0.0,
        "iterations": info.get("iterations", 0.0),
        "time_wall": wall,
    }
    if success:
        profile = compute_path_profile(smoothed)
        row["max_abs_kappa"] = float(np.max(np.abs(profile.kappas)))
    print(
        f"success={success}, status={info['message']}, iters={row['iterations']:.0f}, "
        f"len {row['raw_length']:.2f} -> {row['smoothed_length']:.2f}, time={wall * 1000.0:.1f}ms"
    )
    results.append(row)

    saved_plot = plot_paths(name, raw, smoothed, bound, plot_dir)
    if saved_plot:
        print(f"Saved plot: {saved_plot}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    output_dir = Path(__file__).resolve().parent / "outputs"
    results = []

    run_scenario("Noisy sine", make_noisy_sine(), 0.25, results, output_dir)
    run_scenario("Noisy quarter turn", make_noisy_turn(), 0.2, results, output_dir)
    run_scenario("Pinned three points", np.array([[0.0, 0.0], [1.0, 0.4], [2.0, 0.0]]), 0.0, results, output_dir)

    if results:
        output_dir.mkdir(parents=True, exist_ok=True)
        csv_path = output_dir / "results.csv"
        fieldnames = list(results[0].keys())
        with csv_path.open("w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(results)
        print(f"\nSaved quantitative results: {csv_path}")
    else:
        print("\nNo results to save.")


if __name__ == "__main__":
    main()
