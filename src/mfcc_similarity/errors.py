"""Error taxonomy for MFCC extraction and self-similarity analysis."""

from __future__ import annotations

from typing import Optional, Tuple


class MfccError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(MfccError, ValueError):
    """Invalid static configuration; raised at construction, before any samples."""


class InputLengthError(MfccError, ValueError):
    """A sample block does not have the expected priming/shift length.

    The block is rejected; pipeline state is left untouched.
    """

    def __init__(self, expected: int, actual: int, stage: str = "shift"):
        self.expected = expected
        self.actual = actual
        self.stage = stage
        super().__init__(
            f"{stage} block must have {expected} samples, got {actual}"
        )


class DegenerateVectorError(MfccError, ArithmeticError):
    """Cosine similarity requested against an all-zero feature vector."""

    def __init__(self, indices: Optional[Tuple[int, int]] = None):
        self.indices = indices
        if indices is None:
            msg = "cosine similarity is undefined for a zero vector"
        else:
            msg = (
                "cosine similarity is undefined for a zero vector "
                f"(frames {indices[0]} and {indices[1]})"
            )
        super().__init__(msg)


class PipelineClosedError(MfccError, RuntimeError):
    """Input supplied to a pipeline that has already completed."""
