#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Entry point for the MCDM engine.

Usage:
    python run.py promethee                  # Built-in PROMETHEE II sample
    python run.py ahp                        # Built-in AHP sample
    python run.py electre                    # Built-in ELECTRE I sample
    python run.py path/to/problem.json       # Run a problem document
    python run.py problem.json results_dir   # Custom output directory
"""

import sys

# Configuration
CONFIG = {
    'source': 'promethee',
    'output_dir': 'outputs',
    'top_n': 10,
}


def main():
    """Run one MCDM analysis."""

    source = CONFIG['source']
    output_dir = CONFIG['output_dir']
    if len(sys.argv) > 1:
        source = sys.argv[1]
    if len(sys.argv) > 2:
        output_dir = sys.argv[2]

    # Import here to avoid slow startup for --help
    from mcdm_engine import DecisionPipeline, MCDMError, get_default_config

    config = get_default_config()
    config.paths.output_name = output_dir

    print(f"{'─'*70}")
    print(f"  CONFIGURATION")
    print(f"{'─'*70}")
    print(f"\n  Problem: {source}")
    print(f"  Output: {config.output_dir}/\n")

    pipeline = DecisionPipeline(config)

    try:
        result = pipeline.run(source)
    except (MCDMError, OSError) as e:
        print(f"\n  ❌ Error: {e}")
        sys.exit(1)

    print_results(result)

    print(f"\n{'─'*70}")
    print(f"  ANALYSIS COMPLETE")
    print(f"{'─'*70}")
    print(f"\n  📊 Results saved to '{config.output_dir}/':")
    for kind, path in result.saved_files.items():
        print(f"     • {kind}: {path}")
    print()


def print_results(result):
    """Print ranking and method diagnostics."""
    print(result.summary())

    print(f"\n  🏆 RANKING")
    ranking = result.ranking.head(CONFIG['top_n'])
    method = result.method.value

    if method == 'promethee':
        print(f"     {'Rank':<6} {'Alternative':<20} {'Phi+':>8} {'Phi-':>8} {'Phi':>8}")
        print(f"     {'-'*54}")
        for row in ranking.itertuples(index=False):
            print(f"     {row.rank:<6} {row.alternative:<20} "
                  f"{row.phi_plus:>8.4f} {row.phi_minus:>8.4f} {row.phi_net:>8.4f}")

    elif method == 'ahp':
        print(f"     {'Rank':<6} {'Alternative':<20} {'Score':>8}")
        print(f"     {'-'*38}")
        for row in ranking.itertuples(index=False):
            print(f"     {row.rank:<6} {row.alternative:<20} {row.score:>8.4f}")
        print("\n  ⚖️  CRITERIA WEIGHTS")
        for name, weight in result.result.criteria_weights.items():
            print(f"     {name:<20} {weight:.4f}")

    else:
        print(f"     {'Rank':<6} {'Alternative':<20} {'Outranks':>9} {'By':>4} {'Net':>5}")
        print(f"     {'-'*48}")
        for row in ranking.itertuples(index=False):
            print(f"     {row.rank:<6} {row.alternative:<20} "
                  f"{row.outranks:>9} {row.outranked_by:>4} {row.net_dominance:>5}")

    print(f"\n  ⏱️  Execution Time: {result.execution_time:.3f} seconds")


if __name__ == '__main__':
    main()
