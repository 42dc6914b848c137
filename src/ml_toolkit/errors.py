from __future__ import annotations


class ToolkitError(Exception):
    """Base class for errors that abort a toolkit run."""


class ConfigurationError(ToolkitError, ValueError):
    """Raised when options are invalid, conflicting, or missing."""


class DimensionalityError(ToolkitError, ValueError):
    """Raised when data shapes do not agree with each other or with a model."""


class DatasetIOError(ToolkitError, OSError):
    """Raised when a dataset or model file cannot be read or written."""


class ModelFormatError(ToolkitError, ValueError):
    """Raised when a serialized model cannot be interpreted."""
