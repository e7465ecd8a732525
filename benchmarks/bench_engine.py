"""Benchmark QC engine performance."""

import time

import numpy as np

from profqc.qc import variable_names as vn
from profqc.qc.data_handler import ProfileDataHandler
from profqc.qc.engine import ProfileQCEngine


def create_sounding(n_levels: int, rng: np.random.Generator) -> ProfileDataHandler:
    """Create a synthetic sounding.

    Args:
        n_levels: Number of levels between 1050 and 10 hPa.
        rng: Random generator for the temperature noise.

    Returns:
        Data handler with pressures in Pa and temperatures in K.
    """
    pressures = np.sort(rng.uniform(1000.0, 105000.0, n_levels))[::-1]
    # Snap a few levels onto standard pressures so the check has work to do
    for p_std in (100000.0, 85000.0, 70000.0, 50000.0, 30000.0, 20000.0, 10000.0):
        pressures[np.argmin(np.abs(pressures - p_std))] = p_std
    t_obs = 288.0 - 45.0 * np.log(101325.0 / pressures) / np.log(10.0) + rng.normal(0.0, 0.8, n_levels)

    handler = ProfileDataHandler({
        vn.AIR_PRESSURE: pressures,
        vn.OBS_AIR_TEMPERATURE: t_obs,
        vn.HOFX_AIR_TEMPERATURE: t_obs + rng.normal(0.0, 0.5, n_levels),
        vn.QC_T_FLAGS: np.zeros(n_levels, dtype=np.int64),
        vn.T_OBS_CORRECTION: np.zeros(n_levels),
    })
    return handler


def benchmark_engine(n_levels: int, n_profiles: int = 200) -> dict:
    """Benchmark QC engine.

    Args:
        n_levels: Levels per sounding.
        n_profiles: Number of soundings checked.

    Returns:
        Benchmark results.
    """
    rng = np.random.default_rng(42)
    handlers = [create_sounding(n_levels, rng) for _ in range(n_profiles)]
    engine = ProfileQCEngine()

    times = []
    flagged = 0
    for handler in handlers:
        start = time.perf_counter()
        report = engine.run(handler)
        times.append(time.perf_counter() - start)
        flagged += report.total_flagged

    return {
        "n_levels": n_levels,
        "n_profiles": n_profiles,
        "mean_time": np.mean(times),
        "std_time": np.std(times),
        "min_time": np.min(times),
        "max_time": np.max(times),
        "total_flagged": flagged,
    }


def main() -> None:
    """Run benchmarks."""
    sizes = [50, 500, 5000]

    print("profqc Engine Benchmark")
    print("=" * 50)

    for size in sizes:
        print(f"\nBenchmarking soundings of {size:,} levels...")
        results = benchmark_engine(size)
        print(f"  Mean time per profile: {results['mean_time'] * 1e3:.2f}ms (±{results['std_time'] * 1e3:.2f}ms)")
        print(f"  Levels flagged: {results['total_flagged']}")
        print(f"  Throughput: {size / results['mean_time']:,.0f} levels/sec")


if __name__ == "__main__":
    main()
