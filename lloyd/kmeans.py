from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional
import time
import numpy as np
from tqdm import tqdm

from .assign import NumpyResolver
from .base import ClusteringResult, LoopState, LoopTimings, Resolver
from .centroids import compute_centroids
from .utils import check_dataset

MAX_ITERS = 100


@dataclass
class LloydParams:
    max_iters: int = MAX_ITERS
    workers: int = 1
    chunk_size: int = 4096
    backend: str = "numpy"
    device: str = "auto"
    verbose: bool = False


def round_robin(n: int, k: int) -> np.ndarray:
    return np.arange(n, dtype=np.int64) % k


def make_resolver(params: LloydParams, pool=None) -> Resolver:
    if params.backend == "numpy":
        return NumpyResolver(params.workers, params.chunk_size, pool=pool)
    if params.backend == "torch":
        # deferred so numpy-only runs never import torch
        from .torch_assign import TorchResolver
        return TorchResolver(params.device, params.chunk_size)
    raise ValueError(f"Unknown assignment backend: {params.backend}")


def kmeans_lloyd(
    X,
    k: int,
    params: Optional[LloydParams] = None
) -> ClusteringResult:
    """
    Lloyd's k-means with deterministic round-robin seeding (point i starts in
    cluster i mod k).

    Each iteration recomputes the centroids from the current assignment, then
    re-assigns every point to its nearest centroid. The loop stops as soon as a
    pass changes nothing (CONVERGED) or after `max_iters` passes
    (ITERATION_LIMIT_REACHED); in the latter case the last assignment is still
    returned.

    Preconditions (non-empty dataset, uniform dimension, finite values,
    1 <= k <= n, max_iters >= 1) are checked up front and raise ValueError.
    """
    p = params or LloydParams()
    X = check_dataset(X, k)
    if p.max_iters < 1:
        raise ValueError(f"max_iters must be >= 1, got {p.max_iters}")
    if p.workers < 1:
        raise ValueError(f"workers must be >= 1, got {p.workers}")
    n = X.shape[0]

    assign = round_robin(n, k)
    centroids: Optional[np.ndarray] = None
    result = ClusteringResult(assignment=assign, centroids=np.empty((0, X.shape[1])))
    timings = LoopTimings()

    pool = ThreadPoolExecutor(max_workers=p.workers) if p.workers > 1 else None
    try:
        resolver = make_resolver(p, pool=pool)
        bar = tqdm(total=p.max_iters, desc="lloyd", unit="it", disable=not p.verbose)
        with bar:
            while result.state is LoopState.RUNNING:
                t0 = time.perf_counter()
                centroids, empty = compute_centroids(
                    X, assign, k, previous=centroids, workers=p.workers, pool=pool
                )
                timings.means_s += time.perf_counter() - t0
                if empty:
                    result.empty_events += len(empty)
                    if p.verbose:
                        tqdm.write(f"[Lloyd] iter {result.iterations + 1}: empty clusters {empty}")

                t1 = time.perf_counter()
                changed = resolver.resolve(X, centroids, assign)
                timings.assign_s += time.perf_counter() - t1

                result.iterations += 1
                bar.update(1)
                if not changed:
                    result.state = LoopState.CONVERGED
                elif result.iterations >= p.max_iters:
                    result.state = LoopState.ITERATION_LIMIT_REACHED
    finally:
        if pool is not None:
            pool.shutdown(wait=True)

    result.centroids = centroids
    result.timings = timings
    if p.verbose:
        tqdm.write(f"[Lloyd] {result.state.value} after {result.iterations} iterations "
                   f"(t_means: {timings.means_s:.4f}, t_ind: {timings.assign_s:.4f})")
    return result
