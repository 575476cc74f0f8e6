#!/usr/bin/env python3
"""Benchmark the period planning solvers on synthetic curricula."""

from __future__ import annotations

import argparse
import time
from pathlib import Path

import pandas as pd

from term_planner.scheduler import (
    generate_random_curriculum,
    solve_with_critical_path_greedy,
    solve_with_hybrid_exact_first,
    solve_with_mip_min_periods,
    solve_with_oracle_exact,
    validate_plan,
)


def _timed(solve, classes: list[dict], **options) -> tuple[object, float]:
    started_at = time.perf_counter()
    result = solve(classes, **options)
    return result, (time.perf_counter() - started_at) * 1000


def _record(
    rows: list[dict],
    suite: str,
    size: int,
    seed: int,
    solver: str,
    result,
    runtime_ms: float,
    classes: list[dict],
) -> None:
    if not result.success:
        raise RuntimeError(f"{solver} failed on size {size}, seed {seed}: {result.error}")
    if not validate_plan(classes, result).valid:
        raise RuntimeError(f"{solver} produced an invalid plan on size {size}, seed {seed}")
    rows.append(
        {
            "suite": suite,
            "size": size,
            "seed": seed,
            "solver": solver,
            "periods": result.total_periods,
            "runtime_ms": runtime_ms,
            "optimal": result.optimality == "optimal_proven",
        }
    )


def run_small_optimality(seeds: int) -> pd.DataFrame:
    """Compare every solver against the oracle on 10-class curricula."""
    rows: list[dict] = []
    for seed in range(1, seeds + 1):
        classes = generate_random_curriculum(
            10,
            seed=seed,
            prereq_probability=0.2,
            max_prereqs_per_class=2,
            max_options_per_class=3,
            max_blocks_per_option=2,
        )
        runs = {
            "greedy": _timed(solve_with_critical_path_greedy, classes, period_search_time_limit_ms=50),
            "hybrid": _timed(solve_with_hybrid_exact_first, classes, timeout_ms=2_500, min_horizon_slice_ms=20),
            "mip": _timed(solve_with_mip_min_periods, classes, timeout_ms=4_500),
            "oracle": _timed(solve_with_oracle_exact, classes, timeout_ms=6_000, max_classes_for_exact=20),
        }
        for solver, (result, runtime_ms) in runs.items():
            _record(rows, "small", 10, seed, solver, result, runtime_ms, classes)

    df = pd.DataFrame(rows)
    oracle = df[df["solver"] == "oracle"].set_index("seed")["periods"]
    df["gap_vs_oracle"] = df["periods"] - df["seed"].map(oracle)
    return df


def run_scale(sizes: list[int], runs: int) -> pd.DataFrame:
    """Compare greedy and MIP on growing curricula."""
    rows: list[dict] = []
    for size in sizes:
        for run in range(runs):
            seed = size * 100 + run
            classes = generate_random_curriculum(
                size,
                seed=seed,
                prereq_probability=0.16,
                max_prereqs_per_class=3,
                max_options_per_class=4,
                max_blocks_per_option=2,
            )
            result, runtime_ms = _timed(solve_with_critical_path_greedy, classes, period_search_time_limit_ms=70)
            _record(rows, "scale", size, seed, "greedy", result, runtime_ms, classes)
            result, runtime_ms = _timed(solve_with_mip_min_periods, classes, timeout_ms=4_900)
            _record(rows, "scale", size, seed, "mip", result, runtime_ms, classes)
    return pd.DataFrame(rows)


def _summarize(df: pd.DataFrame, by: list[str]) -> pd.DataFrame:
    return df.groupby(by).agg(
        runtime_mean=("runtime_ms", "mean"),
        runtime_p95=("runtime_ms", lambda s: s.quantile(0.95)),
        runtime_max=("runtime_ms", "max"),
        periods_mean=("periods", "mean"),
        optimal_share=("optimal", "mean"),
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark period planning solvers.")
    parser.add_argument("--seeds", type=int, default=20, help="Seeds for the small suite (default: 20)")
    parser.add_argument(
        "--sizes",
        type=int,
        nargs="+",
        default=[10, 20, 30, 40, 49],
        help="Class counts for the scale suite",
    )
    parser.add_argument("--runs", type=int, default=10, help="Runs per size (default: 10)")
    parser.add_argument("--output", type=Path, help="Write raw results to this CSV file")
    args = parser.parse_args()

    small = run_small_optimality(args.seeds)
    print("== Small optimality (oracle reference) ==")
    print(_summarize(small, ["solver"]).round(2).to_string())
    gaps = small[small["solver"] != "oracle"].groupby("solver")["gap_vs_oracle"]
    print("\nGap vs oracle:")
    print(gaps.describe()[["mean", "min", "max"]].round(2).to_string())
    mip_matches = (small[small["solver"] == "mip"]["gap_vs_oracle"] == 0).sum()
    print(f"\nmip exact matches: {mip_matches}/{args.seeds}")

    scale = run_scale(args.sizes, args.runs)
    print("\n== Scale benchmark ==")
    print(_summarize(scale, ["size", "solver"]).round(2).to_string())

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        pd.concat([small, scale], ignore_index=True).to_csv(args.output, index=False)
        print(f"\nRaw results written to {args.output}")


if __name__ == "__main__":
    main()
