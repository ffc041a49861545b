from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
import numpy as np


class LoopState(Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    ITERATION_LIMIT_REACHED = "iteration_limit_reached"


@dataclass
class LoopTimings:
    means_s: float = 0.0
    assign_s: float = 0.0


@dataclass
class ClusteringResult:
    assignment: np.ndarray
    centroids: np.ndarray
    state: LoopState = LoopState.RUNNING
    iterations: int = 0
    timings: LoopTimings = field(default_factory=LoopTimings)
    empty_events: int = 0

    @property
    def converged(self) -> bool:
        return self.state is LoopState.CONVERGED


class Resolver(ABC):
    """
    Nearest-centroid assignment step.

    `resolve` overwrites `assign` in place and returns True iff any entry
    changed.
    """
    @abstractmethod
    def resolve(
        self,
        X: np.ndarray,
        C: np.ndarray,
        assign: np.ndarray
    ) -> bool:
        pass
