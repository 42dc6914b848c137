from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import numpy as np

from ..errors import DatasetIOError

_DELIMITERS: Dict[str, Optional[str]] = {
    ".csv": ",",
    ".tsv": "\t",
    ".txt": None,
}
_BINARY_EXTENSION = ".npy"


def _format_of(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix != _BINARY_EXTENSION and suffix not in _DELIMITERS:
        supported = ", ".join(sorted([*_DELIMITERS, _BINARY_EXTENSION]))
        raise DatasetIOError(
            f"Unable to detect type of '{path}'; extension must be one of {supported}."
        )
    return suffix


def load_matrix(path: Path, transpose: bool = True) -> np.ndarray:
    """Load a 2-D numeric matrix; with ``transpose`` each file row becomes a column."""
    path = Path(path)
    suffix = _format_of(path)
    if not path.exists():
        raise DatasetIOError(f"Cannot open file '{path}' for loading.")
    try:
        if suffix == _BINARY_EXTENSION:
            matrix = np.atleast_2d(np.load(path, allow_pickle=False)).astype(float)
        else:
            matrix = np.loadtxt(path, delimiter=_DELIMITERS[suffix], ndmin=2, dtype=float)
    except (OSError, ValueError) as exc:
        raise DatasetIOError(f"Loading from '{path}' failed: {exc}") from exc
    if matrix.ndim != 2:
        raise DatasetIOError(f"'{path}' does not contain a 2-D matrix.")
    return matrix.T if transpose else matrix


def save_matrix(path: Path, matrix: np.ndarray, transpose: bool = True, fmt: str = "%.17g") -> None:
    path = Path(path)
    suffix = _format_of(path)
    data = np.atleast_2d(np.asarray(matrix))
    if transpose:
        data = data.T
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if suffix == _BINARY_EXTENSION:
            np.save(path, data)
        else:
            delimiter = _DELIMITERS[suffix] or " "
            np.savetxt(path, data, delimiter=delimiter, fmt=fmt)
    except OSError as exc:
        raise DatasetIOError(f"Cannot open file '{path}' for saving: {exc}") from exc


def load_labels(path: Path) -> np.ndarray:
    """Load a label vector stored as a single row or a single column."""
    matrix = load_matrix(path, transpose=False)
    if matrix.shape[0] == 1 or matrix.shape[1] == 1:
        return matrix.ravel()
    raise DatasetIOError(
        f"Labels in '{path}' must be a single row or column; got shape {matrix.shape}."
    )


def as_integer_labels(values: np.ndarray) -> np.ndarray:
    values = np.asarray(values)
    if values.size and not np.all(np.isfinite(values)):
        raise DatasetIOError("Labels must be finite integers.")
    rounded = np.rint(values)
    if not np.array_equal(rounded, values):
        raise DatasetIOError("Labels must be integers.")
    return rounded.astype(np.int64)


def save_labels(path: Path, labels: np.ndarray) -> None:
    """Write one label per line; integral labels are written without a decimal point."""
    labels = np.asarray(labels).ravel()
    fmt = "%d" if np.issubdtype(labels.dtype, np.integer) else "%.17g"
    save_matrix(path, labels.reshape(1, -1), transpose=True, fmt=fmt)
