#!/usr/bin/env python
"""
env/benchmarks/loop_bench.py

Episode-loop micro-benchmark.

Examples
--------
$ python -m env.benchmarks.loop_bench
$ python -m env.benchmarks.loop_bench --n 5e4 --learner constant --profile
"""

from __future__ import annotations
import argparse
import time
import statistics
import json
import pathlib
import tracemalloc

import jax

from controller.ase_ace import AseAceLearner, LearnerParams
from controller.constant import ConstantLearner
from env.closedloop import EpisodeController

# -----------------------------------------------------------------------------#
# CLI                                                                           #
# -----------------------------------------------------------------------------#

def _cli():
    p = argparse.ArgumentParser()
    p.add_argument("--n",       type=lambda s: int(float(s)), default=10_000, help="# iterations")
    p.add_argument("--learner", choices=["ase", "constant"], default="ase")
    p.add_argument("--seed",    type=int, default=0)
    p.add_argument("--device",  choices=["cpu", "gpu"], default="cpu")
    p.add_argument("--profile", action="store_true", help="dump cProfile stats")
    return p.parse_args()

# -----------------------------------------------------------------------------#
# Core helpers                                                                  #
# -----------------------------------------------------------------------------#

def _run(n, loop):
    """Run tight benchmark loop."""
    loop.step_once()  # warm-up JIT
    times_ns = []

    for _ in range(n):
        t0 = time.perf_counter_ns()
        loop.step_once()
        times_ns.append(time.perf_counter_ns() - t0)

    return times_ns

# -----------------------------------------------------------------------------#
# Entry point                                                                   #
# -----------------------------------------------------------------------------#

def main() -> None:
    args = _cli()
    jax.config.update("jax_platform_name", args.device)

    learner = (AseAceLearner(LearnerParams(seed=args.seed))
               if args.learner == "ase" else ConstantLearner())
    loop = EpisodeController(learner)

    # Optional profiling
    if args.profile:
        import cProfile
        prof = cProfile.Profile()
        prof.enable()

    # Memory tracking
    tracemalloc.start()
    times = _run(args.n, loop)
    peak = tracemalloc.get_traced_memory()[1] / 2**20  # MiB
    tracemalloc.stop()

    if args.profile:
        prof.disable()
        out = pathlib.Path("results/profile_loop.pstats")
        out.parent.mkdir(exist_ok=True, parents=True)
        prof.dump_stats(out)
        print(f"[profile] saved → {out}")

    mean = statistics.mean(times) / 1e3  # µs
    p99 = statistics.quantiles(times, n=100)[-1] / 1e3
    stats = loop.finish()

    print(f"mean {mean:.2f} µs | 99-th % {p99:.2f} µs | peak {peak:.1f} MiB")
    print(f"failures {stats.failure_count} | max duration {stats.max_duration}")

    # Save results for trending
    pathlib.Path("results").mkdir(exist_ok=True)
    with open("results/bench_last.json", "w") as fp:
        json.dump({
            "mean_us": mean,
            "p99_us": p99,
            "peak_mb": peak,
            "learner": args.learner,
            "n_steps": args.n,
            "device": args.device,
            "failures": stats.failure_count,
            "max_duration": stats.max_duration,
        }, fp, indent=2)

if __name__ == "__main__":
    main()
