from typing import List, Optional, Sequence
import numpy as np


def default_header(d: int) -> List[str]:
    """
    Column names used when writing points without an explicit header.
    2-D data gets the familiar "x,y"; anything else is numbered x0..x{d-1}.
    """
    if d == 2:
        return ["x", "y"]
    return [f"x{i}" for i in range(d)]


def read_points(path: str) -> np.ndarray:
    """
    Read a comma-separated point file into an [N, d] float64 matrix.

    Expected layout:
      x,y            <- one header row (always skipped)
      -5.31,6.72     <- one point per line, d numeric columns
      ...

    Blank lines are ignored. A field that is not a number, or a row whose
    column count differs from the first data row, raises ValueError with the
    offending line number.
    """
    rows: List[List[float]] = []
    d: Optional[int] = None
    with open(path, "r", encoding="utf-8") as f:
        f.readline() # skip header
        for lineno, line in enumerate(f, start=2):
            line = line.strip()
            if not line:
                continue
            parts = line.split(",")
            try:
                row = [float(v) for v in parts]
            except ValueError:
                raise ValueError(f"{path}:{lineno}: non-numeric field in {line!r}") from None
            if d is None:
                d = len(row)
            elif len(row) != d:
                raise ValueError(f"{path}:{lineno}: expected {d} columns, got {len(row)}")
            rows.append(row)
    if not rows:
        raise ValueError(f"{path}: no data rows")
    return np.array(rows, dtype=np.float64)


def write_points(
    path: str,
    X: np.ndarray,
    header: Optional[Sequence[str]] = None
) -> None:
    """
    Write an [N, d] matrix as CSV with a header row (see default_header).
    Values use repr() so they read back bit-for-bit.
    """
    X = np.asarray(X, dtype=np.float64)
    cols = list(header) if header is not None else default_header(X.shape[1])
    if len(cols) != X.shape[1]:
        raise ValueError(f"header has {len(cols)} columns, data has {X.shape[1]}")
    with open(path, "w", encoding="utf-8") as f:
        f.write(",".join(cols) + "\n")
        for row in X:
            f.write(",".join(repr(float(v)) for v in row) + "\n")


def format_assignment(assign: Sequence[int]) -> str:
    return ",".join(str(int(a)) for a in assign)


def write_assignment(path: str, assign: Sequence[int]) -> None:
    # Same row order as the input points: line i+1 is the cluster of point i
    with open(path, "w", encoding="utf-8") as f:
        f.write("cluster\n")
        for a in assign:
            f.write(f"{int(a)}\n")
