"""
BucketMap Demo -- capacity growth, load factor, and chain length distribution.

Generates:
- viz/*.png -- Individual visualization files
- report.pdf -- Comprehensive PDF report
"""

import math
import sys
import time
from pathlib import Path
from typing import Tuple

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

_src = str(Path(__file__).resolve().parent / "src")
if _src not in sys.path:
    sys.path.insert(0, _src)

from bucket_map import BucketMap, DEFAULT_CAPACITY, LOAD_FACTOR

SEED = 42
VIZ_DIR = Path(__file__).parent / "viz"


def load_factor_trace(n: int, capacity: int = DEFAULT_CAPACITY) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Insert n distinct keys and record (size, capacity, load factor) after each."""
    m = BucketMap(capacity)
    sizes = np.empty(n, dtype=np.int64)
    capacities = np.empty(n, dtype=np.int64)
    for i in range(n):
        m.insert(f"key{i}", i)
        sizes[i] = len(m)
        capacities[i] = m.capacity()
    return sizes, capacities, sizes / capacities


def chain_length_histogram(m: BucketMap) -> np.ndarray:
    """h[i] is the number of buckets whose chain holds exactly i entries."""
    return np.bincount(np.asarray(m.chain_lengths(), dtype=np.int64))


def expected_chain_histogram(n: int, capacity: int, max_len: int) -> np.ndarray:
    """Poisson expectation of chain_length_histogram for uniformly hashed keys.

    With lambda = n / capacity, the expected number of buckets holding i
    entries is capacity * e^-lambda * lambda^i / i!.
    """
    lam = n / capacity
    i = np.arange(max_len + 1)
    factorials = np.array([math.factorial(k) for k in i], dtype=np.float64)
    return capacity * np.exp(-lam) * lam ** i / factorials


def example_1_capacity_growth():
    """Capacity doubling and the load factor sawtooth."""
    print("=" * 60)
    print("Example 1: Capacity Growth and Load Factor")
    print("=" * 60)

    n = 2000
    sizes, capacities, load = load_factor_trace(n)
    resizes = np.flatnonzero(np.diff(capacities)) + 1

    print(f"Inserted {n} keys starting from capacity {DEFAULT_CAPACITY}")
    print(f"Final capacity: {capacities[-1]}")
    print(f"Resizes: {len(resizes)} (at sizes {sizes[resizes].tolist()})")
    print(f"Max load factor observed: {load.max():.4f} (threshold {LOAD_FACTOR})")

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    axes[0].step(sizes, capacities, where="post", color="steelblue", linewidth=2)
    axes[0].set_xlabel("Entries")
    axes[0].set_ylabel("Capacity (buckets)")
    axes[0].set_yscale("log", base=2)
    axes[0].set_title("Capacity Doubles at the Threshold")
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(sizes, load, color="steelblue", linewidth=1.5)
    axes[1].axhline(LOAD_FACTOR, color="red", linestyle="--", label=f"LOAD_FACTOR = {LOAD_FACTOR}")
    axes[1].set_xlabel("Entries")
    axes[1].set_ylabel("count / capacity")
    axes[1].set_title("Load Factor After Each Insert")
    axes[1].legend()
    axes[1].grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(VIZ_DIR / "01_capacity_growth.png", dpi=150)
    plt.close(fig)

    return fig, load


def example_2_chain_distribution():
    """Observed chain lengths against the Poisson expectation."""
    print("\n" + "=" * 60)
    print("Example 2: Chain Length Distribution")
    print("=" * 60)

    rng = np.random.default_rng(SEED)
    keys = rng.integers(0, 2 ** 62, size=5000)

    m = BucketMap()
    for key in keys:
        m.insert(int(key), None)

    observed = chain_length_histogram(m)
    expected = expected_chain_histogram(len(m), m.capacity(), len(observed) - 1)

    print(f"Entries: {len(m)}, capacity: {m.capacity()}, load factor: {m.load_factor():.4f}")
    print(f"{'length':>8} {'observed':>10} {'expected':>10}")
    for length, (obs, exp) in enumerate(zip(observed, expected)):
        print(f"{length:>8} {obs:>10} {exp:>10.1f}")

    fig, ax = plt.subplots(figsize=(8, 6))
    x = np.arange(len(observed))
    ax.bar(x - 0.2, observed, width=0.4, color="steelblue", label="Observed")
    ax.bar(x + 0.2, expected, width=0.4, color="orange", label="Poisson expectation")
    ax.set_xlabel("Chain length")
    ax.set_ylabel("Buckets")
    ax.set_title(f"Chain Lengths ({len(m)} keys, {m.capacity()} buckets)")
    ax.legend()
    ax.grid(True, alpha=0.3, axis="y")
    fig.tight_layout()
    fig.savefig(VIZ_DIR / "02_chain_distribution.png", dpi=150)
    plt.close(fig)

    return fig, observed


def example_3_insert_cost():
    """Per-insert wall time: resize spikes amortize to a flat average."""
    print("\n" + "=" * 60)
    print("Example 3: Amortized Insert Cost")
    print("=" * 60)

    n = 20000
    m = BucketMap()
    timings = np.empty(n)
    capacities = np.empty(n, dtype=np.int64)
    for i in range(n):
        start = time.perf_counter()
        m.insert(i, i)
        timings[i] = time.perf_counter() - start
        capacities[i] = m.capacity()

    resizes = np.flatnonzero(np.diff(capacities)) + 1
    running_mean = np.cumsum(timings) / np.arange(1, n + 1)

    print(f"Mean insert: {timings.mean() * 1e6:.2f} us")
    print(f"Median insert: {np.median(timings) * 1e6:.2f} us")
    print(f"Slowest insert: {timings.max() * 1e6:.2f} us at entry {timings.argmax() + 1}")

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.semilogy(timings * 1e6, color="lightgray", linewidth=0.5, label="Single insert")
    ax.semilogy(running_mean * 1e6, color="steelblue", linewidth=2, label="Running mean")
    for idx in resizes:
        ax.axvline(idx, color="red", alpha=0.2, linewidth=1)
    ax.set_xlabel("Insert number")
    ax.set_ylabel("Time (us, log scale)")
    ax.set_title("Insert Cost with Resizes (red)")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(VIZ_DIR / "03_insert_cost.png", dpi=150)
    plt.close(fig)

    return fig, timings


def generate_pdf_report(figures_data):
    """Collect the saved example images into a single PDF."""
    pdf_path = Path(__file__).parent / "report.pdf"

    with PdfPages(pdf_path) as pdf:
        fig = plt.figure(figsize=(11, 8.5))
        fig.text(0.5, 0.6, "BucketMap", fontsize=28, ha="center", fontweight="bold")
        fig.text(0.5, 0.5, "Separate chaining with load-factor doubling", fontsize=16, ha="center")
        fig.text(0.5, 0.4, f"LOAD_FACTOR = {LOAD_FACTOR}, DEFAULT_CAPACITY = {DEFAULT_CAPACITY}",
                 fontsize=12, ha="center")
        pdf.savefig(fig)
        plt.close(fig)

        for title, filename in figures_data:
            page = plt.figure(figsize=(11, 8.5))
            page.text(0.5, 0.98, title, fontsize=14, ha="center", fontweight="bold")
            ax = page.add_axes([0.05, 0.05, 0.9, 0.88])
            ax.imshow(plt.imread(VIZ_DIR / filename))
            ax.axis("off")
            pdf.savefig(page)
            plt.close(page)

    print(f"PDF report saved to: {pdf_path}")
    return pdf_path


def main():
    print("\n" + "#" * 60)
    print("#" + " " * 22 + "BUCKETMAP DEMO" + " " * 22 + "#")
    print("#" * 60)
    print(f"\nRandom seed: {SEED}")
    print(f"Output directory: {VIZ_DIR}")

    VIZ_DIR.mkdir(exist_ok=True)

    example_1_capacity_growth()
    example_2_chain_distribution()
    example_3_insert_cost()

    generate_pdf_report([
        ("Example 1: Capacity Growth", "01_capacity_growth.png"),
        ("Example 2: Chain Distribution", "02_chain_distribution.png"),
        ("Example 3: Insert Cost", "03_insert_cost.png"),
    ])

    print("\n" + "=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)
    print(f"\nGenerated files:")
    for f in sorted(VIZ_DIR.glob("*.png")):
        print(f"  - {f.relative_to(VIZ_DIR.parent)}")
    print(f"  - report.pdf")


if __name__ == "__main__":
    main()
