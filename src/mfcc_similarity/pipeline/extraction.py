"""Extraction session: sample blocks -> frames -> MFCC feature matrix.

Priming -> Running -> Complete. The first block (carry_samples long)
primes the frame assembler; every later block (shift_samples long)
yields one feature vector. The session completes when max_frames vectors
exist or the input is exhausted (finish()), and accepts nothing after.

Tables are read-only and may be shared by several sessions; frame state
and the feature matrix belong to exactly one session.
"""

from __future__ import annotations

import enum
import logging
from typing import Iterable, List, Optional

import numpy as np

from mfcc_similarity.audio.config import MfccConfig
from mfcc_similarity.audio.features import FrameAssembler, MfccExtractor
from mfcc_similarity.audio.reader import iter_blocks
from mfcc_similarity.audio.tables import PrecomputedTables, resolve
from mfcc_similarity.errors import ConfigError, InputLengthError, PipelineClosedError

logger = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    PRIMING = "priming"
    RUNNING = "running"
    COMPLETE = "complete"


class Pipeline:
    """Runs FrameAssembler -> SpectralAnalyzer -> FilterbankProjector -> CepstralTransform.

    Interface:
      pipeline = Pipeline(MfccConfig())
      pipeline.push(priming_block)        # -> None
      vector = pipeline.push(shift_block) # -> (num_cepstral + 1,)
      features = pipeline.run(blocks)     # feed + finish, returns (n, num_cepstral + 1)
    """

    def __init__(
        self,
        config: Optional[MfccConfig] = None,
        tables: Optional[PrecomputedTables] = None,
    ):
        if tables is not None and config is not None and tables.config != config:
            raise ConfigError("tables were built for a different configuration")
        if tables is None:
            tables = resolve(config)
        self.tables = tables
        self.config = tables.config
        self.extractor = MfccExtractor(tables)

        self._assembler: Optional[FrameAssembler] = None
        self._features: List[np.ndarray] = []
        self._state = PipelineState.PRIMING

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def is_complete(self) -> bool:
        return self._state is PipelineState.COMPLETE

    @property
    def expected_block_size(self) -> int:
        """Length the next block must have."""
        if self._state is PipelineState.PRIMING:
            return self.config.carry_samples
        return self.config.shift_samples

    @property
    def features(self) -> np.ndarray:
        """Snapshot of the feature matrix, shape (n_frames, num_cepstral + 1)."""
        if not self._features:
            return np.zeros((0, self.config.feature_size), dtype=np.float64)
        return np.vstack(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def process_frame(self, frame: np.ndarray) -> np.ndarray:
        """One full window through spectrum -> filterbank -> DCT; session state untouched."""
        return self.extractor.process_frame(frame)

    def push(self, block: np.ndarray) -> Optional[np.ndarray]:
        """Consume one block.

        Returns:
            The new feature vector, or None for the priming block.

        Raises:
            InputLengthError: Wrong block length; state is unchanged.
            PipelineClosedError: The session is already complete.
        """
        if self._state is PipelineState.COMPLETE:
            raise PipelineClosedError("pipeline is complete and accepts no further input")

        block = np.asarray(block, dtype=np.float64)
        if self._state is PipelineState.PRIMING:
            if block.ndim != 1 or len(block) != self.config.carry_samples:
                raise InputLengthError(self.config.carry_samples, block.size, stage="priming")
            self._assembler = FrameAssembler(self.config, block)
            self._transition(PipelineState.RUNNING)
            return None

        frame = self._assembler.assemble(block)
        vector = self.extractor.process_frame(frame)
        self._features.append(vector)
        if len(self._features) >= self.config.max_frames:
            self._transition(PipelineState.COMPLETE)
        return vector

    def feed(self, blocks: Iterable[np.ndarray]) -> int:
        """Push blocks until the iterable ends or the session completes.

        Returns:
            Number of feature vectors produced by this call.
        """
        produced = 0
        for block in blocks:
            if self._state is PipelineState.COMPLETE:
                break
            if self.push(block) is not None:
                produced += 1
        return produced

    def finish(self) -> np.ndarray:
        """Mark the input exhausted and return the final feature matrix."""
        if self._state is not PipelineState.COMPLETE:
            self._transition(PipelineState.COMPLETE)
        return self.features

    def run(self, blocks: Iterable[np.ndarray]) -> np.ndarray:
        """Feed every block, then finish. Returns the feature matrix."""
        self.feed(blocks)
        return self.finish()

    def _transition(self, state: PipelineState) -> None:
        logger.debug("Pipeline %s -> %s", self._state.value, state.value)
        self._state = state
        if state is PipelineState.COMPLETE:
            logger.info("Extraction complete: %d frames", len(self._features))


def extract_features(
    samples: np.ndarray,
    config: Optional[MfccConfig] = None,
    tables: Optional[PrecomputedTables] = None,
) -> np.ndarray:
    """Run a whole 1-D signal through a fresh pipeline session."""
    pipeline = Pipeline(config=config, tables=tables)
    return pipeline.run(iter_blocks(samples, pipeline.config))
