"""Self-similarity (cosine distance) matrix."""

from mfcc_similarity.similarity.matrix import (
    SimilarityMatrix,
    SimilarityMatrixBuilder,
    build_similarity_matrix,
    cosine_distance,
    cosine_similarity,
)

__all__ = [
    "SimilarityMatrix",
    "SimilarityMatrixBuilder",
    "build_similarity_matrix",
    "cosine_distance",
    "cosine_similarity",
]
