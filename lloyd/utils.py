from __future__ import annotations
from typing import List, Optional, Sequence
import numbers
import numpy as np


def distance(p1: Sequence[float], p2: Sequence[float]) -> float:
    """
    Euclidean (L2) distance between two points of equal dimension.
    """
    a = np.asarray(p1, dtype=np.float64)
    b = np.asarray(p2, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"dimension mismatch: {a.shape} vs {b.shape}")
    diff = a - b
    return float(np.sqrt(np.dot(diff, diff)))


def sq_distances(X: np.ndarray, C: np.ndarray) -> np.ndarray:
    """
    Squared distances from every row of X to every centroid, shape [n, k].

    Differences are taken explicitly (no |x|^2 + |c|^2 - 2xc expansion) so a
    point's distances are the same whichever batch it is computed in.
    """
    diff = X[:, None, :] - C[None, :, :]
    return np.einsum("ijk,ijk->ij", diff, diff)


def inertia(X: np.ndarray, C: np.ndarray, assign: np.ndarray) -> float:
    diff = X - C[assign]
    return float(np.einsum("ij,ij->", diff, diff))


def check_dataset(X, k: Optional[int] = None) -> np.ndarray:
    """
    Validate a dataset (and optionally k) and return it as a contiguous
    float64 [n, d] array.

    Raises ValueError for an empty dataset, rows of different length,
    zero-dimensional points, non-finite coordinates or k outside 1..n.
    """
    if not isinstance(X, np.ndarray):
        rows = list(X)
        if not rows:
            raise ValueError("dataset is empty")
        dims = {len(r) for r in rows}
        if len(dims) != 1:
            raise ValueError(f"points have inconsistent dimensions: {sorted(dims)}")
        X = rows
    X = np.ascontiguousarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError(f"dataset must be 2-D [n, d], got shape {X.shape}")
    n, d = X.shape
    if n == 0:
        raise ValueError("dataset is empty")
    if d == 0:
        raise ValueError("points must have at least one coordinate")
    if not np.all(np.isfinite(X)):
        raise ValueError("dataset contains NaN or infinite values")
    if k is not None and (isinstance(k, bool) or not isinstance(k, numbers.Integral)):
        raise ValueError(f"k must be an integer, got {k!r}")
    if k is not None and (k < 1 or k > n):
        raise ValueError(f"k must be in 1..n (n={n}), got {k}")
    return X


def split_rows(n: int, parts: int) -> List[slice]:
    # contiguous, disjoint, covering 0..n; never more parts than rows
    parts = max(1, min(parts, n))
    bounds = np.linspace(0, n, parts + 1).astype(np.int64)
    return [slice(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:])]
