"""Centralized MFCC and self-similarity configuration.

Encoding standards:
- Audio: mono 16-bit PCM at one fixed sample rate per run
- Frames: 25 ms window / 10 ms shift, FFT 512 (power of two)
- Features: 40 mel filters, 12 cepstra + c0
- Similarity: cosine distance, 365 anchors over at most 790 frames
"""

from dataclasses import dataclass

from mfcc_similarity.errors import ConfigError


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


@dataclass(frozen=True)
class MfccConfig:
    """Feature extraction and similarity configuration. Validated on construction."""

    # Input
    sample_rate: int = 16_000

    # Framing
    window_ms: float = 25.0
    shift_ms: float = 10.0
    fft_size: int = 512

    # Mel filterbank / cepstra
    num_filters: int = 40
    num_cepstral: int = 12  # excluding c0
    low_freq: float = 50.0
    high_freq: float = 4000.0
    pre_emph_coef: float = 0.97

    # Session limits
    max_frames: int = 790
    anchor_count: int = 365

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ConfigError(f"sample_rate must be > 0, got {self.sample_rate}")
        if self.window_ms <= 0 or self.shift_ms <= 0:
            raise ConfigError("window_ms and shift_ms must be > 0")
        if self.shift_samples <= 0:
            raise ConfigError(
                f"frame shift of {self.shift_ms} ms is shorter than one sample"
            )
        if self.shift_samples >= self.window_samples:
            raise ConfigError(
                f"shift ({self.shift_samples} samples) must be smaller than "
                f"window ({self.window_samples} samples)"
            )
        if self.window_samples < 2:
            raise ConfigError("window must span at least 2 samples")
        if not is_power_of_two(self.fft_size):
            raise ConfigError(f"fft_size must be a power of two, got {self.fft_size}")
        if self.fft_size < self.window_samples:
            raise ConfigError(
                f"fft_size ({self.fft_size}) is smaller than the window "
                f"({self.window_samples} samples)"
            )
        if self.low_freq < 0:
            raise ConfigError(f"low_freq must be >= 0, got {self.low_freq}")
        if self.low_freq >= self.high_freq:
            raise ConfigError(
                f"low_freq ({self.low_freq}) must be below high_freq ({self.high_freq})"
            )
        if self.high_freq > self.sample_rate / 2:
            raise ConfigError(
                f"high_freq ({self.high_freq}) exceeds Nyquist ({self.sample_rate / 2})"
            )
        if self.num_filters <= 0:
            raise ConfigError("num_filters must be > 0")
        if self.num_cepstral <= 0:
            raise ConfigError("num_cepstral must be > 0")
        if not 0.0 <= self.pre_emph_coef < 1.0:
            raise ConfigError(
                f"pre_emph_coef must be in [0, 1), got {self.pre_emph_coef}"
            )
        if self.max_frames < 1:
            raise ConfigError("max_frames must be >= 1")
        if self.anchor_count < 0:
            raise ConfigError("anchor_count must be >= 0")

    @property
    def window_samples(self) -> int:
        """Analysis window length in samples."""
        return int(self.sample_rate * self.window_ms / 1000)

    @property
    def shift_samples(self) -> int:
        """Frame shift in samples."""
        return int(self.sample_rate * self.shift_ms / 1000)

    @property
    def carry_samples(self) -> int:
        """Overlap carried between consecutive frames (also the priming length)."""
        return self.window_samples - self.shift_samples

    @property
    def num_fft_bins(self) -> int:
        """Non-negative frequency bins kept from each FFT."""
        return self.fft_size // 2 + 1

    @property
    def feature_size(self) -> int:
        """Length of one feature vector (c0 included)."""
        return self.num_cepstral + 1
