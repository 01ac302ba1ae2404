"""Cosine-distance self-similarity over a feature matrix.

Only the upper triangle of the first anchor_count rows is stored:
for j in [0, anchor_count), i in [j, n_frames), value = 1 - cos(f[j], f[i]),
flattened row-major. anchor_count and n_frames are independent, so the
result is generally ragged (non-square).
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from mfcc_similarity.errors import DegenerateVectorError

logger = logging.getLogger(__name__)


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """dot(a, b) / (|a| |b|), in [-1, 1].

    Raises:
        DegenerateVectorError: a or b is all zeros.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        raise DegenerateVectorError()
    return float(np.clip(np.dot(a, b) / (norm_a * norm_b), -1.0, 1.0))


def cosine_distance(a: np.ndarray, b: np.ndarray) -> float:
    """1 - cosine_similarity(a, b), in [0, 2]."""
    return 1.0 - cosine_similarity(a, b)


def _row_offset(j: int, n_frames: int) -> int:
    # Rows r < j hold n_frames - r values each.
    return j * n_frames - j * (j - 1) // 2


@dataclass(frozen=True, eq=False)
class SimilarityMatrix:
    """Flattened distances for pairs (j, i), j < anchor_count, i >= j."""

    values: np.ndarray
    anchor_count: int
    n_frames: int

    def __len__(self) -> int:
        return len(self.values)

    def index(self, j: int, i: int) -> int:
        """Position of pair (j, i) in :attr:`values`."""
        if not 0 <= j < self.anchor_count:
            raise IndexError(f"anchor {j} out of range [0, {self.anchor_count})")
        if not j <= i < self.n_frames:
            raise IndexError(f"frame {i} out of range [{j}, {self.n_frames})")
        return _row_offset(j, self.n_frames) + (i - j)

    def distance(self, a: int, b: int) -> float:
        """Distance between frames a and b, in either order."""
        j, i = (a, b) if a <= b else (b, a)
        return float(self.values[self.index(j, i)])

    def row(self, j: int) -> np.ndarray:
        """Distances from anchor j to frames j..n_frames-1."""
        start = self.index(j, j)
        return self.values[start : start + self.n_frames - j]

    def to_dense(self) -> np.ndarray:
        """(anchor_count, n_frames) array; the unstored lower triangle is NaN."""
        dense = np.full((self.anchor_count, self.n_frames), np.nan)
        for j in range(self.anchor_count):
            dense[j, j:] = self.row(j)
        return dense


class SimilarityMatrixBuilder:
    """Builds a :class:`SimilarityMatrix` from a feature matrix.

    Interface:
      builder = SimilarityMatrixBuilder(workers=4)
      matrix = builder.build(features, anchor_count=365)

    Rows are independent; with workers > 1 they are computed on a thread
    pool and written back in anchor order.
    """

    def __init__(self, workers: Optional[int] = None):
        if workers is not None and workers < 1:
            raise ValueError("workers must be >= 1")
        self.workers = workers

    def build(self, features: np.ndarray, anchor_count: int) -> SimilarityMatrix:
        """
        Args:
            features: (n_frames, n_coefficients) feature matrix (read-only here).
            anchor_count: Number of leading frames used as row anchors.

        Raises:
            ValueError: anchor_count is negative or exceeds n_frames.
            DegenerateVectorError: an involved feature vector is all zeros.
        """
        features = np.asarray(features, dtype=np.float64)
        if features.ndim != 2:
            raise ValueError(f"features must be 2-D, got shape {features.shape}")
        n_frames = features.shape[0]
        if anchor_count < 0 or anchor_count > n_frames:
            raise ValueError(
                f"anchor_count ({anchor_count}) must be in [0, {n_frames}] for {n_frames} frames"
            )

        norms = np.linalg.norm(features, axis=1)
        rows: Dict[int, np.ndarray] = {}
        if self.workers is None or self.workers == 1 or anchor_count < 2:
            for j in range(anchor_count):
                rows[j] = self._row(features, norms, j)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                futures = {
                    executor.submit(self._row, features, norms, j): j
                    for j in range(anchor_count)
                }
                errors: Dict[int, BaseException] = {}
                for fut in as_completed(futures):
                    exc = fut.exception()
                    if exc is not None:
                        errors[futures[fut]] = exc
                    else:
                        rows[futures[fut]] = fut.result()
            if errors:
                # Report the lowest anchor, as the sequential path does.
                raise errors[min(errors)]

        if anchor_count:
            values = np.concatenate([rows[j] for j in range(anchor_count)])
        else:
            values = np.zeros(0, dtype=np.float64)
        logger.info(
            "Built similarity matrix: %d anchors x %d frames (%d values)",
            anchor_count,
            n_frames,
            len(values),
        )
        return SimilarityMatrix(values=values, anchor_count=anchor_count, n_frames=n_frames)

    @staticmethod
    def _row(features: np.ndarray, norms: np.ndarray, j: int) -> np.ndarray:
        if norms[j] == 0:
            raise DegenerateVectorError((j, j))
        tail = norms[j:]
        zero = np.flatnonzero(tail == 0)
        if zero.size:
            raise DegenerateVectorError((j, j + int(zero[0])))
        sims = (features[j:] @ features[j]) / (tail * norms[j])
        return 1.0 - np.clip(sims, -1.0, 1.0)


def build_similarity_matrix(
    features: np.ndarray,
    anchor_count: int,
    workers: Optional[int] = None,
) -> SimilarityMatrix:
    return SimilarityMatrixBuilder(workers=workers).build(features, anchor_count)
