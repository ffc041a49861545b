from __future__ import annotations
from typing import Optional
import numpy as np
import torch

from .base import Resolver


class TorchResolver(Resolver):
    """
    Nearest-centroid assignment on a torch device.

    The dataset is uploaded once and reused across passes while the same array
    is passed in. Distances are computed in float64 from explicit differences,
    chunk by chunk, and the result is copied back into the caller's vector.
    """
    def __init__(self, device: str = "auto", chunk_size: int = 4096):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.device = torch.device("cuda" if (device == "auto" and torch.cuda.is_available()) else ("cpu" if device == "auto" else device))
        self.chunk_size = chunk_size
        self._src: Optional[np.ndarray] = None
        self._X: Optional[torch.Tensor] = None

    def _dataset(self, X: np.ndarray) -> torch.Tensor:
        if self._src is not X:
            self._X = torch.from_numpy(np.ascontiguousarray(X, dtype=np.float64)).to(self.device)
            self._src = X
        return self._X

    def resolve(
        self,
        X: np.ndarray,
        C: np.ndarray,
        assign: np.ndarray
    ) -> bool:
        Xt = self._dataset(X)
        Ct = torch.from_numpy(np.ascontiguousarray(C, dtype=np.float64)).to(self.device)
        out = []
        with torch.no_grad():
            for start in range(0, Xt.shape[0], self.chunk_size):
                diff = Xt[start:start + self.chunk_size, None, :] - Ct[None, :, :]
                # first minimum wins on ties, same as np.argmin
                out.append(torch.argmin((diff * diff).sum(dim=2), dim=1))
        nearest = torch.cat(out).cpu().numpy().astype(np.int64)
        changed = bool(np.any(nearest != assign))
        assign[:] = nearest
        return changed
