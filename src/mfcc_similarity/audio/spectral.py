"""Pre-emphasis, Hamming window, recursive radix-2 FFT and power spectrum."""

from __future__ import annotations

import numpy as np

from mfcc_similarity.audio.tables import PrecomputedTables


class SpectralAnalyzer:
    """Turns one analysis frame into its one-sided power spectrum.

    Interface:
      analyzer = SpectralAnalyzer(tables)
      power = analyzer.power_spectrum(frame)   # frame: (window_samples,)
      spectrum = analyzer.fft(x)               # len(x): power of two <= fft_size
    """

    def __init__(self, tables: PrecomputedTables):
        self.tables = tables
        self.config = tables.config
        self._twiddles = tables.twiddles

    def pre_emphasis_window(self, frame: np.ndarray) -> np.ndarray:
        """y[0] = h[0] x[0]; y[i] = h[i] (x[i] - a x[i-1])."""
        x = np.asarray(frame, dtype=np.float64)
        emphasized = np.empty_like(x)
        emphasized[0] = x[0]
        emphasized[1:] = x[1:] - self.config.pre_emph_coef * x[:-1]
        return self.tables.hamming * emphasized

    def fft(self, x: np.ndarray) -> np.ndarray:
        """Recursive decimation-in-time FFT.

        Args:
            x: Real or complex samples; length must be a power of two no
               larger than the configured fft_size.

        Returns:
            Complex spectrum of the same length.
        """
        x = np.asarray(x, dtype=np.complex128)
        n = len(x)
        if n == 1:
            return x
        twiddle = self._twiddles.get(n)
        if twiddle is None:
            raise ValueError(
                f"no twiddle table for size {n} (power of two <= {self.config.fft_size} required)"
            )
        even = self.fft(x[0::2])
        odd = twiddle * self.fft(x[1::2])
        return np.concatenate([even + odd, even - odd])

    def ifft(self, spectrum: np.ndarray) -> np.ndarray:
        """Inverse of :meth:`fft` via conjugation."""
        spectrum = np.asarray(spectrum, dtype=np.complex128)
        return np.conj(self.fft(np.conj(spectrum))) / len(spectrum)

    def power_spectrum(self, frame: np.ndarray) -> np.ndarray:
        """Window, zero-pad to fft_size, FFT and keep |X[i]|^2 for the first fft_size/2 + 1 bins."""
        windowed = self.pre_emphasis_window(frame)
        padded = np.zeros(self.config.fft_size, dtype=np.float64)
        padded[: len(windowed)] = windowed
        spectrum = self.fft(padded)
        return np.abs(spectrum[: self.config.num_fft_bins]) ** 2
