# Lloyd k-means package
from .base import ClusteringResult, LoopState, LoopTimings, Resolver
from .utils import check_dataset, distance, inertia, sq_distances
from .centroids import compute_centroids
from .assign import NumpyResolver, compute_assignments
from .kmeans import LloydParams, MAX_ITERS, kmeans_lloyd


ASSIGN_BACKENDS = {
    "numpy": "NumPy thread pool",
    "torch": "PyTorch device"
}
