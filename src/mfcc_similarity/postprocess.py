"""Text rendering for feature vectors and similarity values."""

from typing import Iterable

import numpy as np


def format_feature_vector(vector: Iterable[float]) -> str:
    """Render one vector as comma-separated scientific notation, e.g. '1.000000e+00, -2.500000e-01'."""
    return ", ".join(f"{float(v):e}" for v in vector)


def format_features(features: np.ndarray) -> str:
    """One formatted vector per line, newline-terminated."""
    return "".join(format_feature_vector(row) + "\n" for row in features)


def format_similarity(values: Iterable[float]) -> str:
    """Flat similarity values, one per line in (j, i) row-major order."""
    return "".join(f"{float(v):e}\n" for v in values)
