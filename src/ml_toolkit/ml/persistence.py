from __future__ import annotations

import pickle
from pathlib import Path
from typing import Any

from ..errors import DatasetIOError, ModelFormatError


def save_bundle(bundle: Any, path: Path, name: str) -> None:
    """Pickle ``bundle`` under the archive ``name``, overwriting ``path``."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            pickle.dump({name: bundle}, handle)
    except OSError as exc:
        raise DatasetIOError(f"Cannot open file '{path}' for saving: {exc}") from exc


def load_bundle(path: Path, name: str) -> Any:
    path = Path(path)
    if not path.exists():
        raise DatasetIOError(f"Cannot open file '{path}' for loading.")
    try:
        with path.open("rb") as handle:
            archive = pickle.load(handle)
    except (OSError, pickle.UnpicklingError, EOFError) as exc:
        raise DatasetIOError(f"Loading from '{path}' failed: {exc}") from exc
    if not isinstance(archive, dict) or name not in archive:
        raise ModelFormatError(f"'{path}' does not contain an object named '{name}'.")
    return archive[name]
