"""Bidiagonal SVD Comparison Framework.

Benchmarks the bidiagonal QR iteration against dense NumPy / SciPy SVDs across
matrix orders, measuring execution time, reconstruction error, loss of
orthogonality, singular value error and memory usage.
"""

import argparse
from functools import partial

from .algos import DEFAULT_MAX_SWEEPS
from .benchmark_common import ComparisonRunner, ResultsVisualizer
from .matrix_generators import MatrixGenerator

DEFAULT_SIZES = [8, 16, 32, 64, 128]

MATRIX_KINDS = {
    "random": "random bidiagonal matrix",
    "graded": "graded bidiagonal matrix",
    "constant": "constant bidiagonal matrix",
    "zero-diagonal": "bidiagonal matrix with a zero diagonal entry",
}


def make_generator(kind: str, seed: int, ratio: float = 0.1):
    """Return a function mapping n to a bidiagonal pair (d, e) of the given kind."""
    if kind == "random":
        return partial(MatrixGenerator.random_bidiagonal, seed=seed)
    if kind == "graded":
        return partial(MatrixGenerator.graded_bidiagonal, ratio=ratio, seed=seed)
    if kind == "constant":
        return MatrixGenerator.constant_bidiagonal
    if kind == "zero-diagonal":
        return partial(MatrixGenerator.zero_diagonal_bidiagonal, seed=seed)
    raise ValueError(f"Unknown matrix kind: {kind}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare the bidiagonal QR SVD against dense SVDs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Random upper bidiagonal matrices of the default sizes (outputs to results/)
  python -m bidiag_svd.compare_bidiagonal

  # Graded lower bidiagonal matrices, grading factor 0.01
  python -m bidiag_svd.compare_bidiagonal --kind graded --ratio 0.01 --lower

  # Large sizes without the dense baselines, no plots
  python -m bidiag_svd.compare_bidiagonal -n 500 1000 2000 --no-dense --no-plots
        """,
    )

    parser.add_argument(
        "--sizes",
        "-n",
        type=int,
        nargs="+",
        default=DEFAULT_SIZES,
        help=f"Matrix orders to test (default: {' '.join(map(str, DEFAULT_SIZES))})",
    )
    parser.add_argument(
        "--kind",
        choices=sorted(MATRIX_KINDS),
        default="random",
        help="Kind of bidiagonal test matrix (default: random)",
    )
    parser.add_argument(
        "--ratio",
        type=float,
        default=0.1,
        help="Grading factor for --kind graded (default: 0.1)",
    )
    parser.add_argument(
        "--lower",
        action="store_true",
        help="Treat the off-diagonal as subdiagonal (lower bidiagonal input)",
    )
    parser.add_argument(
        "--max-sweeps",
        type=int,
        default=DEFAULT_MAX_SWEEPS,
        help=f"QR iteration budget per singular value (default: {DEFAULT_MAX_SWEEPS})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=str,
        default="results",
        help="Directory to save plots and CSV (default: results)",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip plot generation",
    )
    parser.add_argument(
        "--no-dense",
        action="store_true",
        help="Skip the dense NumPy / SciPy baselines",
    )
    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.kind == "graded" and not 0 < args.ratio <= 1:
        parser.error(f"--ratio must be in (0, 1], got {args.ratio}")

    try:
        runner = ComparisonRunner(
            matrix_generator=make_generator(args.kind, args.seed, args.ratio),
            sizes=args.sizes,
            lower=args.lower,
            max_sweeps=args.max_sweeps,
            skip_dense=args.no_dense,
            matrix_description=MATRIX_KINDS[args.kind],
        )
    except ValueError as e:
        parser.error(str(e))

    results = runner.run_all()

    label = f"{args.kind}_{'lower' if args.lower else 'upper'}"
    visualizer = ResultsVisualizer(results, matrix_type_label=label)
    csv_path = visualizer.save_csv(save_dir=args.output_dir)
    print(f"Results written to {csv_path}")

    if not args.no_plots:
        print("Generating plots...")
        visualizer.plot_all(save_dir=args.output_dir)

    print("\n" + "=" * 60)
    print("SUMMARY STATISTICS")
    print("=" * 60)

    summary = visualizer.summary()
    if not summary.empty:
        print(summary.to_string(float_format=lambda v: f"{v:.3e}"))

    failed_results = [r for r in results if not r.success]
    if failed_results:
        print(f"\n{len(failed_results)} algorithm runs failed:")
        for r in failed_results:
            print(f"  {r.method_name} at n = {r.n}: {r.error_message}")

    print("\nComparison complete!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
