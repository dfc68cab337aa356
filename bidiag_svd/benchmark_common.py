"""Shared benchmarking infrastructure for bidiagonal SVD comparisons.

This module provides common classes and utilities for benchmarking the
bidiagonal QR iteration against dense library SVDs across matrix sizes.
"""

import time
import tracemalloc
from dataclasses import asdict, dataclass
from functools import partial
from pathlib import Path
from typing import Callable, List, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from scipy.linalg import svdvals

from .algos import (
    DEFAULT_MAX_SWEEPS,
    bidiagonal_svd,
    numpy_bidiagonal_svd,
    scipy_bidiagonal_svd,
    to_dense,
)


@dataclass
class BenchmarkResult:
    """Store results for a single algorithm at a single matrix size."""

    method_name: str
    n: int
    time_sec: float
    error_reconstruction: float
    error_orthogonality: float
    error_singular_values: float
    memory_bytes: int
    success: bool = True
    error_message: str = ""


class AlgorithmBenchmark:
    """Benchmark a single algorithm."""

    def __init__(self, name: str, func: Callable, returns_factors: bool = True):
        """
        Args:
            name: Display name for algorithm
            func: Function taking (d, e, lower) and returning (U, S, Vt) or S
            returns_factors: True if func returns (U, S, Vt), False if only S
        """
        self.name = name
        self.func = func
        self.returns_factors = returns_factors

    def run(self, d: np.ndarray, e: np.ndarray, lower: bool = False) -> BenchmarkResult:
        """
        Run benchmark for a given bidiagonal matrix.

        Args:
            d: diagonal
            e: off-diagonal
            lower: True if ``e`` is the subdiagonal

        Returns:
            BenchmarkResult with all metrics
        """
        n = d.shape[0]
        try:
            tracemalloc.start()

            start_time = time.perf_counter()
            result = self.func(d.copy(), e.copy(), lower=lower)
            end_time = time.perf_counter()
            time_sec = end_time - start_time

            _, peak = tracemalloc.get_traced_memory()
            tracemalloc.stop()

            errors = self._compute_errors(d, e, lower, result)

            return BenchmarkResult(
                method_name=self.name,
                n=n,
                time_sec=time_sec,
                error_reconstruction=errors[0],
                error_orthogonality=errors[1],
                error_singular_values=errors[2],
                memory_bytes=peak,
                success=True,
            )

        except Exception as exc:
            if tracemalloc.is_tracing():
                tracemalloc.stop()
            return BenchmarkResult(
                method_name=self.name,
                n=n,
                time_sec=0.0,
                error_reconstruction=np.inf,
                error_orthogonality=np.inf,
                error_singular_values=np.inf,
                memory_bytes=0,
                success=False,
                error_message=str(exc),
            )

    def _compute_errors(self, d, e, lower, result) -> tuple[float, float, float]:
        """Compute reconstruction, orthogonality and singular value errors.

        All errors are relative to the spectral norm of B. The first two are
        NaN for algorithms that only return singular values.

        Returns:
            tuple: (error_reconstruction, error_orthogonality, error_singular_values)
        """
        B = to_dense(d, e, lower=lower)
        reference = svdvals(B)
        scale = reference[0] if reference.size and reference[0] > 0 else 1.0

        if self.returns_factors:
            U, S, Vt = result
            n = S.shape[0]
            error_reconstruction = np.linalg.norm(B - (U * S) @ Vt, ord="fro") / scale
            error_orthogonality = max(
                np.linalg.norm(U.T @ U - np.eye(n), ord="fro"),
                np.linalg.norm(Vt @ Vt.T - np.eye(n), ord="fro"),
            )
        else:
            S = result
            error_reconstruction = np.nan
            error_orthogonality = np.nan

        error_singular_values = np.max(np.abs(S - reference)) / scale if S.size else 0.0
        return error_reconstruction, error_orthogonality, error_singular_values


class ComparisonRunner:
    """Run comparison across multiple algorithms and matrix sizes."""

    def __init__(
        self,
        matrix_generator: Callable[[int], tuple],
        sizes: Sequence[int],
        lower: bool = False,
        max_sweeps: int = DEFAULT_MAX_SWEEPS,
        skip_dense: bool = False,
        matrix_description: str = "test matrix",
    ):
        """
        Initialize comparison runner.

        Args:
            matrix_generator: Function mapping n to a bidiagonal pair (d, e)
            sizes: matrix orders to test
            lower: True to treat the generated off-diagonal as subdiagonal
            max_sweeps: iteration budget per singular value for the QR solver
            skip_dense: if True, skip the dense NumPy / SciPy baselines
            matrix_description: description for progress output
        """
        self.matrix_generator = matrix_generator
        self.sizes = sorted(set(int(n) for n in sizes))
        self.lower = lower
        self.max_sweeps = max_sweeps
        self.skip_dense = skip_dense
        self.matrix_description = matrix_description
        self.results: List[BenchmarkResult] = []

        qr_vectors = partial(bidiagonal_svd, max_sweeps=max_sweeps)
        qr_values = partial(bidiagonal_svd, compute_uv=False, max_sweeps=max_sweeps)

        self.algorithms = [
            AlgorithmBenchmark("Bidiagonal QR", qr_vectors, returns_factors=True),
            AlgorithmBenchmark("Bidiagonal QR (values)", qr_values, returns_factors=False),
        ]
        if not skip_dense:
            self.algorithms += [
                AlgorithmBenchmark("NumPy SVD", numpy_bidiagonal_svd, returns_factors=True),
                AlgorithmBenchmark("SciPy gesvd", scipy_bidiagonal_svd, returns_factors=True),
            ]

        self._validate_inputs()

    def run_all(self) -> List[BenchmarkResult]:
        """Run all algorithms for all sizes."""
        print(
            f"Running comparisons on {self.matrix_description} "
            f"for {len(self.sizes)} sizes..."
        )
        print(f"Testing sizes: {self.sizes}\n")

        for idx, n in enumerate(self.sizes, 1):
            print(f"n = {n} ({idx}/{len(self.sizes)}):")
            d, e = self.matrix_generator(n)

            for algo in self.algorithms:
                result = algo.run(d, e, lower=self.lower)
                self.results.append(result)

                if result.success:
                    print(
                        f"  {algo.name:24s}: {result.time_sec:.4f}s, "
                        f"recon={result.error_reconstruction:.2e}, "
                        f"orth={result.error_orthogonality:.2e}, "
                        f"sv={result.error_singular_values:.2e}, "
                        f"mem={result.memory_bytes // 1024}KB"
                    )
                else:
                    print(f"  {algo.name:24s}: FAILED - {result.error_message}")

            print()

        return self.results

    def _validate_inputs(self):
        """Validate sizes and iteration budget."""
        if not self.sizes:
            raise ValueError("At least one matrix size is required")
        if self.sizes[0] < 1:
            raise ValueError(f"Matrix sizes must be at least 1, got {self.sizes[0]}")
        if self.max_sweeps < 1:
            raise ValueError(f"max_sweeps must be at least 1, got {self.max_sweeps}")

        if not self.skip_dense and self.sizes[-1] > 2000:
            print(
                f"WARNING: Dense baselines with n={self.sizes[-1]} need "
                f"{self.sizes[-1] ** 2 * 8 // 2**20} MB per matrix.\n"
                f"Consider using --no-dense flag.\n"
            )


class ResultsVisualizer:
    """Create visualization plots and tables from benchmark results."""

    def __init__(self, results: List[BenchmarkResult], matrix_type_label: str = ""):
        """
        Initialize visualizer.

        Args:
            results: List of benchmark results
            matrix_type_label: Label for the output folder (e.g., "random_upper")
        """
        self.results = results
        self.matrix_type_label = matrix_type_label or "bidiagonal"
        self.methods = sorted(list(set(r.method_name for r in results if r.success)))

        self.colors = {
            "Bidiagonal QR": "#1f77b4",
            "Bidiagonal QR (values)": "#ff7f0e",
            "NumPy SVD": "#8c564b",
            "SciPy gesvd": "#2ca02c",
        }
        self.markers = {
            "Bidiagonal QR": "o",
            "Bidiagonal QR (values)": "s",
            "NumPy SVD": "P",
            "SciPy gesvd": "^",
        }

    def to_dataframe(self) -> pd.DataFrame:
        """All results as one row per (method, n)."""
        return pd.DataFrame([asdict(r) for r in self.results])

    def summary(self) -> pd.DataFrame:
        """Per-method averages over the successful runs."""
        df = self.to_dataframe()
        if df.empty:
            return df
        df = df[df["success"]]
        return df.groupby("method_name")[
            [
                "time_sec",
                "error_reconstruction",
                "error_orthogonality",
                "error_singular_values",
                "memory_bytes",
            ]
        ].mean()

    def save_csv(self, save_dir: str = ".") -> Path:
        """Write all results to results.csv inside the experiment folder."""
        experiment_dir = Path(save_dir) / self.matrix_type_label
        experiment_dir.mkdir(parents=True, exist_ok=True)
        csv_path = experiment_dir / "results.csv"
        self.to_dataframe().to_csv(csv_path, index=False)
        return csv_path

    def plot_all(self, save_dir: str = "."):
        """Generate all plots and save to files."""
        experiment_dir = Path(save_dir) / self.matrix_type_label
        experiment_dir.mkdir(parents=True, exist_ok=True)

        self._plot_metric(
            experiment_dir / "time_vs_n.png",
            lambda r: r.time_sec,
            title="Execution Time vs Matrix Order",
            ylabel="Time (seconds)",
            use_log_scale=True,
        )
        self._plot_metric(
            experiment_dir / "reconstruction_error_vs_n.png",
            lambda r: r.error_reconstruction,
            title="Relative Reconstruction Error vs Matrix Order",
            ylabel="||B - U S Vt||_F / ||B||_2",
            use_log_scale=True,
        )
        self._plot_metric(
            experiment_dir / "orthogonality_error_vs_n.png",
            lambda r: r.error_orthogonality,
            title="Loss of Orthogonality vs Matrix Order",
            ylabel="max(||U'U - I||_F, ||VtVt' - I||_F)",
            use_log_scale=True,
        )
        self._plot_metric(
            experiment_dir / "singular_value_error_vs_n.png",
            lambda r: r.error_singular_values,
            title="Singular Value Error vs Matrix Order",
            ylabel="max |S - S_ref| / ||B||_2",
            use_log_scale=True,
        )
        self._plot_metric(
            experiment_dir / "memory_vs_n.png",
            lambda r: r.memory_bytes / (1024 * 1024),
            title="Peak Memory Usage vs Matrix Order",
            ylabel="Memory (MB)",
            use_log_scale=False,
        )

        print(f"\nPlots saved to {experiment_dir}:")
        print(f"  - time_vs_n.png")
        print(f"  - reconstruction_error_vs_n.png")
        print(f"  - orthogonality_error_vs_n.png")
        print(f"  - singular_value_error_vs_n.png")
        print(f"  - memory_vs_n.png")

    def _plot_metric(
        self,
        save_path: Path,
        metric: Callable[[BenchmarkResult], float],
        title: str,
        ylabel: str,
        use_log_scale: bool = False,
    ):
        """Plot one metric vs n for all methods that report it."""
        fig, ax = plt.subplots(figsize=(10, 6))

        for method in self.methods:
            data = [
                (r.n, metric(r))
                for r in self.results
                if r.method_name == method and r.success and np.isfinite(metric(r))
            ]
            if data:
                sizes, values = zip(*data)
                if use_log_scale:
                    # Exact zeros cannot be shown on a log axis
                    values = [max(v, np.finfo(float).tiny) for v in values]
                ax.plot(
                    sizes,
                    values,
                    marker=self.markers.get(method, "o"),
                    color=self.colors.get(method, "gray"),
                    linewidth=2,
                    markersize=6,
                    label=method,
                )

        self._format_plot(ax, title=title, xlabel="Matrix order n", ylabel=ylabel,
                          use_log_scale=use_log_scale)
        plt.savefig(save_path, dpi=150, bbox_inches="tight")
        plt.close(fig)

    def _format_plot(
        self, ax, title: str, xlabel: str, ylabel: str, use_log_scale: bool = False
    ):
        """Helper to format plot with consistent style."""
        ax.set_title(title, fontsize=14, fontweight="bold")
        ax.set_xlabel(xlabel, fontsize=12)
        ax.set_ylabel(ylabel, fontsize=12)
        ax.grid(True, alpha=0.3, linestyle="--")
        if ax.get_legend_handles_labels()[0]:
            ax.legend(fontsize=10, loc="best")

        if use_log_scale:
            ax.set_yscale("log")
