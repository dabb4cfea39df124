#!/usr/bin/env python3
"""
Full reproducibility script.

Sieves the primes below N, compares pi(x) with the asymptotic li(x)
estimate on a grid, and writes the table and figure.

Usage:
    python run_all.py
    python run_all.py --config config/custom.yaml
"""

import argparse
import sys
import time
from pathlib import Path

import numpy as np
import yaml

from primetab.arena import ArenaExhaustedError, BoundedArena
from primetab.metrics import pi_vs_li
from primetab.plotting import plot_pi_vs_li
from primetab.primes import index_dtype, sieve_primes


def load_config(path) -> dict:
    """Load a YAML config and check the keys run_all needs."""
    with open(path) as f:
        config = yaml.safe_load(f)

    for key in ('N', 'arena_bytes', 'dtype', 'x_grid'):
        if key not in config:
            raise ValueError(f"{path}: missing config key '{key}'")
    if config['dtype'] not in ('float32', 'float64'):
        raise ValueError(f"{path}: dtype must be float32 or float64, got {config['dtype']}")
    if max(config['x_grid']) >= config['N']:
        raise ValueError(f"{path}: x_grid must stay below N={config['N']:,}")

    return config


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Sieve primes and compare pi(x) with li(x)')
    parser.add_argument('--config', type=str, default='config/default.yaml',
                        help='Path to config file')
    parser.add_argument('--output', type=str, default='data/results',
                        help='Output directory')
    args = parser.parse_args(argv)

    config = load_config(args.config)
    N = int(config['N'])
    dtype = np.dtype(config['dtype'])

    print("=" * 60)
    print("Prime Sieve and li(x) Estimate")
    print("=" * 60)
    print(f"\nConfiguration:")
    print(f"  N = {N:,}")
    print(f"  arena_bytes = {config['arena_bytes']}")
    print(f"  dtype = {dtype}")
    print(f"  x_grid = {len(config['x_grid'])} points")
    print()

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    total_start = time.time()

    # 1. Sieve
    print("-" * 60)
    print("1. Sieve of Eratosthenes")
    print("-" * 60)
    arena = None
    if config['arena_bytes'] is not None:
        arena = BoundedArena(int(config['arena_bytes']))
        print(f"  Arena: {arena.capacity:,} bytes, sieve needs {(N + 7) // 8:,}")

    # Rosser-Schoenfeld: pi(x) < 1.25506 x / ln x for x > 1
    capacity = N // 2 + 1 if N < 17 else int(1.26 * N / np.log(N)) + 1
    primes = np.zeros(capacity, dtype=index_dtype(N))

    start = time.time()
    try:
        count = sieve_primes(N, primes, arena)
    except ArenaExhaustedError as e:
        print(f"  ✗ {e}")
        return 1
    primes = primes[:count]
    print(f"  Found {count:,} primes below {N:,}")
    if count:
        print(f"  Largest: {int(primes[-1]):,}")
    print(f"   Completed in {time.time() - start:.1f}s")
    print()

    # 2. pi(x) vs li(x)
    print("-" * 60)
    print("2. pi(x) vs li_asym(x)")
    print("-" * 60)
    start = time.time()
    df = pi_vs_li(config['x_grid'], primes, dtype)
    df.to_csv(output_dir / 'pi_vs_li.csv', index=False)
    print(f"   Completed in {time.time() - start:.1f}s")
    print()

    # 3. Figures
    print("-" * 60)
    print("3. Generating Figures")
    print("-" * 60)
    figures_dir = output_dir / 'figures'
    figures_dir.mkdir(exist_ok=True)

    print("  - pi(x) vs li(x)...")
    plot_pi_vs_li(df, figures_dir / 'pi_vs_li.png')
    print()

    total_time = time.time() - total_start
    print("=" * 60)
    print("COMPLETE")
    print("=" * 60)
    print(f"\nTotal runtime: {total_time:.1f}s")
    print(f"\nOutputs saved to: {output_dir.absolute()}")

    print("\n" + "=" * 60)
    print("KEY RESULTS")
    print("=" * 60)
    print(df[['x', 'pi', 'li_asym', 'li_exact', 'terms', 'rel_err_li_asym']].to_string(index=False))

    return 0


if __name__ == '__main__':
    sys.exit(main())
