"""MFCC extraction and self-similarity analysis - config, tables, spectral stages, pipeline, similarity."""

from mfcc_similarity.audio import MfccConfig, resolve
from mfcc_similarity.errors import (
    ConfigError,
    DegenerateVectorError,
    InputLengthError,
    MfccError,
    PipelineClosedError,
)
from mfcc_similarity.pipeline import Pipeline, extract_features
from mfcc_similarity.similarity import SimilarityMatrixBuilder, build_similarity_matrix

__all__ = [
    "ConfigError",
    "DegenerateVectorError",
    "InputLengthError",
    "MfccConfig",
    "MfccError",
    "Pipeline",
    "PipelineClosedError",
    "SimilarityMatrixBuilder",
    "build_similarity_matrix",
    "extract_features",
    "resolve",
]
