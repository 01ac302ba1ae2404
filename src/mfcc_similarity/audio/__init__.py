"""Audio configuration, precomputed tables and per-frame MFCC stages."""

from mfcc_similarity.audio.config import MfccConfig
from mfcc_similarity.audio.features import (
    CepstralTransform,
    FilterbankProjector,
    FrameAssembler,
    MfccExtractor,
)
from mfcc_similarity.audio.reader import iter_blocks, iter_wav_blocks, load_wav
from mfcc_similarity.audio.spectral import SpectralAnalyzer
from mfcc_similarity.audio.tables import PrecomputedTables, resolve

__all__ = [
    "CepstralTransform",
    "FilterbankProjector",
    "FrameAssembler",
    "MfccConfig",
    "MfccExtractor",
    "PrecomputedTables",
    "SpectralAnalyzer",
    "iter_blocks",
    "iter_wav_blocks",
    "load_wav",
    "resolve",
]
