"""Tests for the benchmarking infrastructure and the comparison CLI."""

import numpy as np
import pandas as pd
import pytest

from bidiag_svd.algos import bidiagonal_svd
from bidiag_svd.benchmark_common import (
    AlgorithmBenchmark,
    ComparisonRunner,
    ResultsVisualizer,
)
from bidiag_svd.compare_bidiagonal import main, make_generator
from bidiag_svd.matrix_generators import MatrixGenerator


def _failing_solver(d, e, lower=False):
    raise RuntimeError("solver exploded")


class TestAlgorithmBenchmark:

    def test_successful_run(self):
        d, e = MatrixGenerator.random_bidiagonal(10)
        result = AlgorithmBenchmark("QR", bidiagonal_svd).run(d, e)

        assert result.success
        assert result.n == 10
        assert result.time_sec >= 0
        assert result.error_reconstruction < 1e-12
        assert result.error_orthogonality < 1e-12
        assert result.error_singular_values < 1e-12

    def test_values_only_reports_nan_factor_errors(self):
        d, e = MatrixGenerator.random_bidiagonal(6)
        values_only = lambda d, e, lower=False: bidiagonal_svd(d, e, lower=lower, compute_uv=False)
        result = AlgorithmBenchmark("QR values", values_only, returns_factors=False).run(d, e)

        assert result.success
        assert np.isnan(result.error_reconstruction)
        assert result.error_singular_values < 1e-12

    def test_failure_is_recorded(self):
        d, e = MatrixGenerator.random_bidiagonal(4)
        result = AlgorithmBenchmark("broken", _failing_solver).run(d, e)

        assert not result.success
        assert result.error_message == "solver exploded"
        assert result.time_sec == 0.0


class TestComparisonRunner:

    def test_run_all(self, capsys):
        runner = ComparisonRunner(
            matrix_generator=make_generator("random", seed=1),
            sizes=[8, 4],
            matrix_description="random bidiagonal matrix",
        )
        results = runner.run_all()

        assert runner.sizes == [4, 8]
        assert len(results) == 2 * len(runner.algorithms)
        assert all(r.success for r in results)
        assert "n = 4" in capsys.readouterr().out

    def test_zero_diagonal_kind_succeeds(self):
        runner = ComparisonRunner(
            make_generator("zero-diagonal", seed=0), sizes=[8, 16, 32], skip_dense=True
        )
        results = runner.run_all()
        assert all(r.success for r in results)

    def test_skip_dense(self):
        runner = ComparisonRunner(make_generator("constant", seed=0), sizes=[5], skip_dense=True)
        assert [a.name for a in runner.algorithms] == ["Bidiagonal QR", "Bidiagonal QR (values)"]

    def test_budget_failure_is_reported_not_raised(self):
        runner = ComparisonRunner(
            make_generator("random", seed=8), sizes=[40], max_sweeps=1, skip_dense=True
        )
        results = runner.run_all()
        assert not any(r.success for r in results)

    @pytest.mark.parametrize("sizes", [[], [0, 3]])
    def test_invalid_sizes(self, sizes):
        with pytest.raises(ValueError):
            ComparisonRunner(make_generator("random", seed=0), sizes=sizes)

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown matrix kind"):
            make_generator("hilbert", seed=0)


class TestResultsVisualizer:

    @pytest.fixture
    def results(self):
        runner = ComparisonRunner(make_generator("graded", seed=2), sizes=[3, 6])
        return runner.run_all()

    def test_dataframe_and_summary(self, results):
        visualizer = ResultsVisualizer(results, matrix_type_label="graded_upper")
        df = visualizer.to_dataframe()

        assert len(df) == len(results)
        assert set(df["method_name"]) == set(visualizer.methods)
        assert list(visualizer.summary().index) == sorted(visualizer.methods)

    def test_save_csv(self, results, tmp_path):
        visualizer = ResultsVisualizer(results, matrix_type_label="graded_upper")
        csv_path = visualizer.save_csv(save_dir=tmp_path)

        assert csv_path == tmp_path / "graded_upper" / "results.csv"
        assert len(pd.read_csv(csv_path)) == len(results)

    def test_plot_all(self, results, tmp_path):
        ResultsVisualizer(results, matrix_type_label="graded_upper").plot_all(save_dir=tmp_path)

        for name in ["time_vs_n", "reconstruction_error_vs_n", "orthogonality_error_vs_n",
                     "singular_value_error_vs_n", "memory_vs_n"]:
            assert (tmp_path / "graded_upper" / f"{name}.png").exists()


class TestCompareBidiagonalCLI:

    def test_main_writes_results(self, tmp_path, capsys):
        code = main(["-n", "4", "6", "--kind", "zero-diagonal", "--lower",
                     "-o", str(tmp_path), "--no-plots"])

        assert code == 0
        assert (tmp_path / "zero-diagonal_lower" / "results.csv").exists()
        out = capsys.readouterr().out
        assert "SUMMARY STATISTICS" in out
        assert "Comparison complete!" in out

    def test_main_with_plots(self, tmp_path):
        assert main(["-n", "5", "-o", str(tmp_path), "--no-dense"]) == 0
        assert (tmp_path / "random_upper" / "time_vs_n.png").exists()

    def test_bad_ratio_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["--kind", "graded", "--ratio", "2.0", "-o", str(tmp_path)])

    def test_bad_size_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["-n", "0", "-o", str(tmp_path)])
