"""Sample block sources for the extraction pipeline.

Blocks follow the pipeline contract: one priming block of
carry_samples, then shift_samples per block. Samples keep the raw
16-bit PCM scale (no division by 32768); the filterbank energy floor
of 1.0 assumes that scale.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple

import numpy as np

from mfcc_similarity.audio.config import MfccConfig

logger = logging.getLogger(__name__)


def iter_blocks(
    samples: np.ndarray,
    config: Optional[MfccConfig] = None,
) -> Iterator[np.ndarray]:
    """Slice a 1-D signal into the priming block followed by shift blocks.

    A trailing partial block is dropped. Nothing is yielded when the signal
    is shorter than the priming block.
    """
    config = config or MfccConfig()
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 1:
        raise ValueError(f"expected mono (1-D) samples, got shape {samples.shape}")
    carry = config.carry_samples
    shift = config.shift_samples
    if len(samples) < carry:
        return
    yield samples[:carry]
    for start in range(carry, len(samples) - shift + 1, shift):
        yield samples[start : start + shift]


def load_wav(path: str, config: Optional[MfccConfig] = None) -> Tuple[int, np.ndarray]:
    """Load a mono 16-bit PCM WAV at the configured rate as float64.

    Returns:
        (sample_rate, samples) with samples in int16 units.
    """
    import scipy.io.wavfile as wavfile

    config = config or MfccConfig()
    sr, audio = wavfile.read(str(path))
    if audio.dtype != np.int16:
        raise ValueError(f"Unsupported audio format {audio.dtype}, use 16 bit PCM WAV.")
    if sr != config.sample_rate:
        raise ValueError(f"Expected {config.sample_rate} Hz, got {sr} Hz. Resample the file.")
    if audio.ndim > 1:
        raise ValueError(f"Expected mono audio, got {audio.shape[1]} channels.")
    logger.debug("Loaded %s: %d samples at %d Hz", path, len(audio), sr)
    return sr, audio.astype(np.float64)


def iter_wav_blocks(path: str, config: Optional[MfccConfig] = None) -> Iterator[np.ndarray]:
    """Load a WAV file and yield pipeline blocks."""
    config = config or MfccConfig()
    _, audio = load_wav(path, config)
    yield from iter_blocks(audio, config)
