from typing import List, Optional, Sequence, Tuple
import numpy as np

# Three well-separated blob corners used by `kmeans_cli.py gen`
DEFAULT_OFFSETS: List[Tuple[float, float]] = [(-6.0, 6.0), (0.0, 0.0), (6.0, -6.0)]


def gen_cluster(
    offset: Sequence[float],
    n: int,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Sample n points in the unit box whose lower corner sits at `offset`:
    every coordinate is uniform in [0, 1) plus the matching offset.
    """
    off = np.asarray(offset, dtype=np.float64)
    return rng.random((n, off.size)) + off


def gen_clustered_data(
    offsets: Sequence[Sequence[float]],
    n_per_cluster: int,
    seed: Optional[int] = None
) -> np.ndarray:
    """
    Stack one generated cluster per offset, in order: rows
    [i*n_per_cluster, (i+1)*n_per_cluster) belong to offsets[i].
    """
    if n_per_cluster < 1:
        raise ValueError(f"n_per_cluster must be >= 1, got {n_per_cluster}")
    rng = np.random.default_rng(seed)
    return np.vstack([gen_cluster(off, n_per_cluster, rng) for off in offsets])
