"""Frame assembly, log-mel filterbank projection and DCT-II cepstra."""

from __future__ import annotations

from typing import Optional

import numpy as np

from mfcc_similarity.audio.config import MfccConfig
from mfcc_similarity.audio.spectral import SpectralAnalyzer
from mfcc_similarity.audio.tables import PrecomputedTables, resolve
from mfcc_similarity.errors import InputLengthError

# Filter energies are floored here before the log.
ENERGY_FLOOR = 1.0


class FrameAssembler:
    """Builds overlapping frames from successive shift-length blocks.

    Owns a fixed window-length buffer whose head holds the carry
    (window_samples - shift_samples trailing samples of the previous frame).
    """

    def __init__(self, config: MfccConfig, initial_carry: np.ndarray):
        self.config = config
        initial_carry = np.asarray(initial_carry, dtype=np.float64)
        if initial_carry.ndim != 1 or len(initial_carry) != config.carry_samples:
            raise InputLengthError(config.carry_samples, initial_carry.size, stage="priming")
        self._buffer = np.zeros(config.window_samples, dtype=np.float64)
        self._buffer[: config.carry_samples] = initial_carry

    @property
    def carry(self) -> np.ndarray:
        """Copy of the samples carried into the next frame."""
        return self._buffer[: self.config.carry_samples].copy()

    def assemble(self, new_samples: np.ndarray) -> np.ndarray:
        """Return carry ++ new_samples and advance the carry by one shift.

        Raises:
            InputLengthError: new_samples is not exactly shift_samples long;
                the carry is left unchanged.
        """
        new_samples = np.asarray(new_samples, dtype=np.float64)
        shift = self.config.shift_samples
        if new_samples.ndim != 1 or len(new_samples) != shift:
            raise InputLengthError(shift, new_samples.size, stage="shift")
        carry = self.config.carry_samples
        self._buffer[carry:] = new_samples
        frame = self._buffer.copy()
        self._buffer[:carry] = frame[shift:]
        return frame


class FilterbankProjector:
    """Power spectrum -> floored natural-log mel energies."""

    def __init__(self, tables: PrecomputedTables):
        self._filterbank = tables.filterbank

    def project(self, power: np.ndarray) -> np.ndarray:
        energies = self._filterbank @ np.asarray(power, dtype=np.float64)
        return np.log(np.maximum(energies, ENERGY_FLOOR))


class CepstralTransform:
    """Log-mel energies -> num_cepstral + 1 cepstral coefficients (c0 included)."""

    def __init__(self, tables: PrecomputedTables):
        self._dct = tables.dct

    def transform(self, log_energies: np.ndarray) -> np.ndarray:
        return self._dct @ np.asarray(log_energies, dtype=np.float64)


class MfccExtractor:
    """Stateless per-frame MFCC computation: spectrum -> filterbank -> DCT.

    Interface:
      extractor = MfccExtractor(tables)
      vector = extractor.process_frame(frame)   # (window_samples,) -> (num_cepstral + 1,)
    """

    def __init__(self, tables: Optional[PrecomputedTables] = None):
        self.tables = tables or resolve()
        self.config = self.tables.config
        self.analyzer = SpectralAnalyzer(self.tables)
        self.projector = FilterbankProjector(self.tables)
        self.cepstral = CepstralTransform(self.tables)

    def process_frame(self, frame: np.ndarray) -> np.ndarray:
        frame = np.asarray(frame, dtype=np.float64)
        if frame.ndim != 1 or len(frame) != self.config.window_samples:
            raise InputLengthError(self.config.window_samples, frame.size, stage="frame")
        power = self.analyzer.power_spectrum(frame)
        log_energies = self.projector.project(power)
        return self.cepstral.transform(log_energies)
