from __future__ import annotations
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import List, Optional, Tuple
import numpy as np

from .utils import split_rows


def _partial_sums(
    X: np.ndarray,
    assign: np.ndarray,
    k: int,
    rows: slice
) -> Tuple[np.ndarray, np.ndarray]:
    lbl = assign[rows]
    sums = np.zeros((k, X.shape[1]), dtype=np.float64)
    np.add.at(sums, lbl, X[rows])
    counts = np.bincount(lbl, minlength=k).astype(np.int64)
    return sums, counts


def compute_centroids(
    X: np.ndarray,
    assign: np.ndarray,
    k: int,
    previous: Optional[np.ndarray] = None,
    workers: int = 1,
    pool: Optional[Executor] = None
) -> Tuple[np.ndarray, List[int]]:
    """
    Mean of the points assigned to each cluster.

    The dataset is cut into `workers` row partitions; each produces per-cluster
    partial sums and counts which are then added together. Partitions run on
    `pool` (or a temporary thread pool) when there is more than one.

    A cluster with no points keeps its centroid from `previous`, or, when
    there is none, is re-seeded with a copy of point `c mod n`.

    Returns:
      C: [k, d] centroid set
      empty: indices of clusters that had no points this pass
    """
    X = np.asarray(X, dtype=np.float64)
    assign = np.asarray(assign, dtype=np.int64)
    n, d = X.shape
    parts = split_rows(n, workers)
    if len(parts) == 1:
        partials = [_partial_sums(X, assign, k, parts[0])]
    elif pool is not None:
        partials = list(pool.map(lambda s: _partial_sums(X, assign, k, s), parts))
    else:
        with ThreadPoolExecutor(max_workers=len(parts)) as tmp:
            partials = list(tmp.map(lambda s: _partial_sums(X, assign, k, s), parts))

    sums = np.zeros((k, d), dtype=np.float64)
    counts = np.zeros(k, dtype=np.int64)
    for s, c in partials:
        sums += s
        counts += c

    C = np.empty((k, d), dtype=np.float64)
    filled = counts > 0
    C[filled] = sums[filled] / counts[filled, None]
    empty = np.flatnonzero(~filled).tolist()
    for c in empty:
        if previous is not None:
            C[c] = previous[c]
        else:
            C[c] = X[c % n]
    return C, empty
