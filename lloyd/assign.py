from __future__ import annotations
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional, Tuple
import numpy as np

from .base import Resolver
from .utils import split_rows, sq_distances


def _resolve_rows(
    X: np.ndarray,
    C: np.ndarray,
    assign: np.ndarray,
    rows: slice,
    chunk_size: int
) -> bool:
    # Only writes assign[rows]; callers hand each worker a disjoint slice.
    changed = False
    for start in range(rows.start, rows.stop, chunk_size):
        stop = min(start + chunk_size, rows.stop)
        nearest = np.argmin(sq_distances(X[start:stop], C), axis=1)
        if not changed and np.any(nearest != assign[start:stop]):
            changed = True
        assign[start:stop] = nearest
    return changed


def resolve_inplace(
    X: np.ndarray,
    C: np.ndarray,
    assign: np.ndarray,
    workers: int = 1,
    chunk_size: int = 4096,
    pool: Optional[Executor] = None
) -> bool:
    """
    Point every row of X at its nearest centroid, writing into `assign`.

    Ties go to the lowest centroid index (argmin keeps the first minimum).
    Rows are split into `workers` disjoint slices; each worker returns its own
    changed flag and the flags are OR-ed once all of them have finished.
    """
    X = np.asarray(X, dtype=np.float64)
    C = np.asarray(C, dtype=np.float64)
    parts = split_rows(X.shape[0], workers)
    if len(parts) == 1:
        return _resolve_rows(X, C, assign, parts[0], chunk_size)
    if pool is not None:
        flags = list(pool.map(lambda s: _resolve_rows(X, C, assign, s, chunk_size), parts))
    else:
        with ThreadPoolExecutor(max_workers=len(parts)) as tmp:
            flags = list(tmp.map(lambda s: _resolve_rows(X, C, assign, s, chunk_size), parts))
    return any(flags)


def compute_assignments(
    X: np.ndarray,
    C: np.ndarray,
    previous: np.ndarray,
    workers: int = 1,
    chunk_size: int = 4096
) -> Tuple[np.ndarray, bool]:
    """
    Functional form of `resolve_inplace`: `previous` is left untouched.

    Returns:
      assign: [n] int64 nearest-centroid indices
      changed: True iff any entry differs from `previous`
    """
    assign = np.array(previous, dtype=np.int64, copy=True)
    changed = resolve_inplace(X, C, assign, workers=workers, chunk_size=chunk_size)
    return assign, changed


class NumpyResolver(Resolver):
    def __init__(
        self,
        workers: int = 1,
        chunk_size: int = 4096,
        pool: Optional[Executor] = None
    ):
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.workers = workers
        self.chunk_size = chunk_size
        self.pool = pool

    def resolve(
        self,
        X: np.ndarray,
        C: np.ndarray,
        assign: np.ndarray
    ) -> bool:
        return resolve_inplace(
            X,
            C,
            assign,
            workers=self.workers,
            chunk_size=self.chunk_size,
            pool=self.pool
        )
