"""Precomputed read-only tables: Hamming window, mel filterbank, DCT basis, twiddles.

Built once per configuration by :func:`resolve` and shared by every stage
(and, read-only, by every pipeline session using the same configuration).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np

from mfcc_similarity.audio.config import MfccConfig

logger = logging.getLogger(__name__)


def _hz_to_mel(hz):
    return 2595 * np.log10(1 + hz / 700)


def _mel_to_hz(mel):
    return 700 * (10 ** (mel / 2595) - 1)


def _frozen(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


def hamming_window(n: int) -> np.ndarray:
    """Hamming coefficients 0.54 - 0.46 cos(2 pi i / (n - 1))."""
    i = np.arange(n, dtype=np.float64)
    return 0.54 - 0.46 * np.cos(2 * np.pi * i / (n - 1))


def mel_center_frequencies(num_filters: int, low_freq: float, high_freq: float) -> np.ndarray:
    """num_filters + 2 edge/centre frequencies (Hz), equally spaced in mel."""
    mel_points = np.linspace(_hz_to_mel(low_freq), _hz_to_mel(high_freq), num_filters + 2)
    return _mel_to_hz(mel_points)


def mel_filterbank(
    num_filters: int,
    num_fft_bins: int,
    sample_rate: float,
    low_freq: float = 0.0,
    high_freq: Optional[float] = None,
) -> np.ndarray:
    """Build triangular mel filterbank, shape (num_filters, num_fft_bins).

    Bin i sits at i * (sample_rate / 2) / (num_fft_bins - 1) Hz. Each filter
    ramps up from its left edge to its centre (inclusive), down to its right
    edge (inclusive) and is zero elsewhere.
    """
    if high_freq is None:
        high_freq = sample_rate / 2
    centres = mel_center_frequencies(num_filters, low_freq, high_freq)
    bin_freqs = np.arange(num_fft_bins) * (sample_rate / 2.0) / (num_fft_bins - 1)

    filters = np.zeros((num_filters, num_fft_bins))
    for m in range(num_filters):
        left, centre, right = centres[m], centres[m + 1], centres[m + 2]
        rising = (bin_freqs - left) / (centre - left)
        falling = (right - bin_freqs) / (right - centre)
        filters[m] = np.where(
            bin_freqs < left,
            0.0,
            np.where(
                bin_freqs <= centre,
                rising,
                np.where(bin_freqs <= right, falling, 0.0),
            ),
        )
    return filters


def dct_basis(num_cepstral: int, num_filters: int) -> np.ndarray:
    """DCT-II basis, shape (num_cepstral + 1, num_filters), scaled by sqrt(2 / num_filters)."""
    i = np.arange(num_cepstral + 1, dtype=np.float64)[:, None]
    j = np.arange(num_filters, dtype=np.float64)[None, :] + 0.5
    return np.sqrt(2.0 / num_filters) * np.cos(np.pi / num_filters * i * j)


def twiddle_factors(fft_size: int) -> Mapping[int, np.ndarray]:
    """exp(-2 pi i k / n) for k < n/2, for every power-of-two n in [2, fft_size]."""
    table = {}
    n = 2
    while n <= fft_size:
        k = np.arange(n // 2)
        table[n] = _frozen(np.exp(-2j * np.pi * k / n))
        n *= 2
    return MappingProxyType(table)


@dataclass(frozen=True, eq=False)
class PrecomputedTables:
    """Read-only tables derived from one :class:`MfccConfig`."""

    config: MfccConfig
    hamming: np.ndarray
    filterbank: np.ndarray
    dct: np.ndarray
    twiddles: Mapping[int, np.ndarray]


def resolve(config: Optional[MfccConfig] = None) -> PrecomputedTables:
    """Validate config (already done by MfccConfig) and build all tables once."""
    config = config or MfccConfig()
    tables = PrecomputedTables(
        config=config,
        hamming=_frozen(hamming_window(config.window_samples)),
        filterbank=_frozen(
            mel_filterbank(
                config.num_filters,
                config.num_fft_bins,
                float(config.sample_rate),
                config.low_freq,
                config.high_freq,
            )
        ),
        dct=_frozen(dct_basis(config.num_cepstral, config.num_filters)),
        twiddles=twiddle_factors(config.fft_size),
    )
    logger.debug(
        "Built tables: window=%d shift=%d fft=%d bins=%d filters=%d cepstra=%d",
        config.window_samples,
        config.shift_samples,
        config.fft_size,
        config.num_fft_bins,
        config.num_filters,
        config.feature_size,
    )
    return tables
