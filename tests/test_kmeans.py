import numpy as np
import pytest

from lloyd import LloydParams, LoopState, kmeans_lloyd
from lloyd.assign import compute_assignments
from lloyd.centroids import compute_centroids
from lloyd.kmeans import make_resolver, round_robin
from lloyd.utils import inertia
from points_gen import DEFAULT_OFFSETS, gen_clustered_data


def grouping(assign):
    # label-permutation invariant view: which rows share a cluster
    groups = {}
    for i, a in enumerate(assign):
        groups.setdefault(int(a), []).append(i)
    return sorted(groups.values())


def test_round_robin_seed():
    assert round_robin(7, 3).tolist() == [0, 1, 2, 0, 1, 2, 0]


def test_nine_point_example(nine_points):
    res = kmeans_lloyd(nine_points, 3)
    assert res.state is LoopState.CONVERGED
    assert res.converged
    assert res.iterations == 3
    assert len(set(res.assignment.tolist())) == 3
    assert grouping(res.assignment) == [[0, 1, 2], [3, 4, 5], [6, 7, 8]]
    np.testing.assert_allclose(res.centroids[res.assignment[0]], nine_points[:3].mean(axis=0))


@pytest.mark.parametrize("k", [1, 2, 3, 5, 17])
def test_output_shape_and_range(blobs, k):
    res = kmeans_lloyd(blobs, k)
    assert res.assignment.shape == (blobs.shape[0],)
    assert res.assignment.min() >= 0
    assert res.assignment.max() < k
    assert res.centroids.shape == (k, 2)
    assert np.all(np.isfinite(res.centroids))


def test_blobs_converge_before_cap(blobs):
    res = kmeans_lloyd(blobs, 3)
    assert res.state is LoopState.CONVERGED
    assert res.iterations < 100
    assert grouping(res.assignment) == [list(range(b * 40, (b + 1) * 40)) for b in range(3)]


@pytest.mark.parametrize("seed", range(5))
def test_generated_blobs_grouped_by_origin(seed):
    X = gen_clustered_data(DEFAULT_OFFSETS, 3, seed=seed)
    res = kmeans_lloyd(X, 3)
    assert res.converged
    assert len(set(res.assignment.tolist())) == 3
    assert grouping(res.assignment) == [[0, 1, 2], [3, 4, 5], [6, 7, 8]]


@pytest.mark.parametrize("k", [2.5, 2.0, True, "3"])
def test_non_integer_k_rejected(nine_points, k):
    with pytest.raises(ValueError, match="integer"):
        kmeans_lloyd(nine_points, k)


def test_numpy_integer_k_accepted(nine_points):
    assert kmeans_lloyd(nine_points, np.int64(3)).converged


def test_single_cluster():
    X = np.array([[1.0, 1.0], [3.0, 5.0]])
    res = kmeans_lloyd(X, 1)
    assert res.assignment.tolist() == [0, 0]
    assert res.iterations == 1
    np.testing.assert_allclose(res.centroids, [[2.0, 3.0]])


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_objective_never_increases(seed):
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(60, 3)) * rng.uniform(0.5, 3.0, size=3)
    k = 4
    assign = round_robin(X.shape[0], k)
    C, _ = compute_centroids(X, assign, k)
    assign, changed = compute_assignments(X, C, assign)
    last = inertia(X, C, assign)
    while changed:
        C_new, _ = compute_centroids(X, assign, k, previous=C)
        assert inertia(X, C_new, assign) <= last + 1e-9 * max(1.0, last)
        assign, changed = compute_assignments(X, C_new, assign)
        cur = inertia(X, C_new, assign)
        assert cur <= last + 1e-9 * max(1.0, last)
        C, last = C_new, cur


def test_k_equals_n_distinct_points():
    rng = np.random.default_rng(11)
    X = rng.normal(size=(6, 2))
    res = kmeans_lloyd(X, 6)
    assert res.converged
    assert res.assignment.tolist() == list(range(6))


def test_k_equals_n_with_duplicates_has_no_nan():
    X = np.array([[0.0, 0.0], [0.0, 0.0], [1.0, 1.0]])
    res = kmeans_lloyd(X, 3)
    assert res.converged
    assert res.iterations == 2
    assert res.assignment.tolist() == [0, 0, 2]
    assert res.empty_events == 1
    assert np.all(np.isfinite(res.centroids))


def test_iteration_limit_returns_last_assignment():
    X = np.array([[0.0], [1.0], [10.0], [11.0]])
    res = kmeans_lloyd(X, 2, LloydParams(max_iters=1))
    assert res.state is LoopState.ITERATION_LIMIT_REACHED
    assert not res.converged
    assert res.iterations == 1
    assert res.assignment.tolist() == [0, 0, 1, 1]

    res = kmeans_lloyd(X, 2, LloydParams(max_iters=2))
    assert res.state is LoopState.CONVERGED
    assert res.iterations == 2


def test_deterministic_across_runs_and_workers(blobs):
    base = kmeans_lloyd(blobs, 4)
    again = kmeans_lloyd(blobs, 4)
    np.testing.assert_array_equal(base.assignment, again.assignment)
    for workers in (2, 4):
        par = kmeans_lloyd(blobs, 4, LloydParams(workers=workers, chunk_size=16))
        np.testing.assert_array_equal(par.assignment, base.assignment)
        assert par.iterations == base.iterations


def test_timings_recorded(blobs):
    res = kmeans_lloyd(blobs, 3)
    assert res.timings.means_s >= 0.0
    assert res.timings.assign_s >= 0.0


def test_verbose_reports_state(nine_points, capsys):
    kmeans_lloyd(nine_points, 3, LloydParams(verbose=True))
    out = capsys.readouterr()
    assert "converged after 3 iterations" in out.out + out.err


@pytest.mark.parametrize("k", [0, 10])
def test_bad_k_rejected(nine_points, k):
    with pytest.raises(ValueError, match="k must be"):
        kmeans_lloyd(nine_points, k)


def test_bad_params_rejected(nine_points):
    with pytest.raises(ValueError, match="max_iters"):
        kmeans_lloyd(nine_points, 3, LloydParams(max_iters=0))
    with pytest.raises(ValueError, match="workers"):
        kmeans_lloyd(nine_points, 3, LloydParams(workers=0))
    with pytest.raises(ValueError, match="backend"):
        make_resolver(LloydParams(backend="opencl"))


def test_ragged_dataset_rejected():
    with pytest.raises(ValueError):
        kmeans_lloyd([[0.0, 1.0], [2.0]], 1)


def test_torch_backend_matches_numpy(blobs):
    pytest.importorskip("torch")
    base = kmeans_lloyd(blobs, 3)
    res = kmeans_lloyd(blobs, 3, LloydParams(backend="torch", device="cpu"))
    np.testing.assert_array_equal(res.assignment, base.assignment)
    assert res.state is base.state
