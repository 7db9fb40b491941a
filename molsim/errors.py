"""Error types raised by the molsim pipeline.

Every error is terminal for a run. The only recovered condition in the pipeline
is a single record that fails to parse while loading a collection; that record
is dropped and no exception is raised.
"""

from __future__ import annotations


class MolSimError(Exception):
    """Base class for all molsim errors."""


class UsageError(MolSimError, ValueError):
    """Missing or malformed command-line input."""


class UnsupportedFormatError(MolSimError, ValueError):
    """A molecule file whose declared format is not SDF or SMILES."""

    def __init__(self, path: str, fmt: str | None = None):
        self.path = str(path)
        self.fmt = fmt
        detail = f" ({fmt})" if fmt else ""
        super().__init__(f"Unsupported molecule file format{detail}: {self.path}")


class FileAccessError(MolSimError, OSError):
    """An input path that does not exist or cannot be read."""


class FingerprintGenerationError(MolSimError, RuntimeError):
    """A loaded record for which no fingerprint could be produced."""


class OutputWriteError(MolSimError, OSError):
    """The report or its metadata sidecar could not be written."""
