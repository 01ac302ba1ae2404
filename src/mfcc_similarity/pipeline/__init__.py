"""MFCC extraction session."""

from mfcc_similarity.pipeline.extraction import Pipeline, PipelineState, extract_features

__all__ = ["Pipeline", "PipelineState", "extract_features"]
