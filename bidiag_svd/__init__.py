# Bidiagonal SVD package

import logging

from .algos import (
    ConvergenceError,
    Uplo,
    bidiagonal_svd,
    bidiagonal_svd_lowrank,
    svd_qr,
    to_dense,
)
from .benchmark_common import BenchmarkResult, AlgorithmBenchmark, ComparisonRunner, ResultsVisualizer
from .matrix_generators import MatrixGenerator

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'ConvergenceError',
    'Uplo',
    'bidiagonal_svd',
    'bidiagonal_svd_lowrank',
    'svd_qr',
    'to_dense',
    'BenchmarkResult',
    'AlgorithmBenchmark',
    'ComparisonRunner',
    'ResultsVisualizer',
    'MatrixGenerator',
]
