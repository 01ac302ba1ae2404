"""Unit tests and toy example for the MFCC extraction pipeline."""

from __future__ import annotations

import unittest
from typing import List

import numpy as np

from mfcc_similarity.audio.config import MfccConfig
from mfcc_similarity.audio.reader import iter_blocks
from mfcc_similarity.audio.tables import resolve
from mfcc_similarity.errors import ConfigError, InputLengthError, PipelineClosedError
from mfcc_similarity.pipeline import Pipeline, PipelineState, extract_features


def _fake_signal(n_samples: int, seed: int = 42) -> np.ndarray:
    """Noise at int16 scale (for testing)."""
    rng = np.random.default_rng(seed)
    return np.round(rng.standard_normal(n_samples) * 2000)


def _blocks(config: MfccConfig, n_shift_blocks: int, seed: int = 42) -> List[np.ndarray]:
    signal = _fake_signal(config.carry_samples + n_shift_blocks * config.shift_samples, seed)
    return list(iter_blocks(signal, config))


class TestPipeline(unittest.TestCase):
    """Tests for Pipeline state machine and outputs."""

    def setUp(self) -> None:
        self.config = MfccConfig(
            sample_rate=16_000,
            window_ms=25,
            shift_ms=10,
            fft_size=512,
            num_filters=40,
            num_cepstral=12,
            low_freq=50,
            high_freq=4000,
        )

    def test_zero_input_gives_zero_vectors(self) -> None:
        pipeline = Pipeline(self.config)
        self.assertIsNone(pipeline.push(np.zeros(240)))
        pipeline.push(np.zeros(160))
        pipeline.push(np.zeros(160))
        features = pipeline.finish()
        self.assertEqual(features.shape, (2, 13))
        np.testing.assert_array_equal(features, np.zeros((2, 13)))

    def test_state_transitions(self) -> None:
        pipeline = Pipeline(self.config)
        self.assertIs(pipeline.state, PipelineState.PRIMING)
        self.assertEqual(pipeline.expected_block_size, 240)
        pipeline.push(np.zeros(240))
        self.assertIs(pipeline.state, PipelineState.RUNNING)
        self.assertEqual(pipeline.expected_block_size, 160)
        pipeline.finish()
        self.assertIs(pipeline.state, PipelineState.COMPLETE)
        with self.assertRaises(PipelineClosedError):
            pipeline.push(np.zeros(160))

    def test_wrong_priming_length(self) -> None:
        pipeline = Pipeline(self.config)
        with self.assertRaises(InputLengthError):
            pipeline.push(np.zeros(160))
        self.assertIs(pipeline.state, PipelineState.PRIMING)
        pipeline.push(np.zeros(240))
        self.assertIs(pipeline.state, PipelineState.RUNNING)

    def test_wrong_shift_length_is_recoverable(self) -> None:
        blocks = _blocks(self.config, 4)
        reference = Pipeline(self.config).run(blocks)

        pipeline = Pipeline(self.config)
        pipeline.push(blocks[0])
        pipeline.push(blocks[1])
        pipeline.push(blocks[2])
        with self.assertRaises(InputLengthError):
            pipeline.push(np.zeros(159))
        self.assertEqual(len(pipeline), 2)
        pipeline.push(blocks[3])
        pipeline.push(blocks[4])
        np.testing.assert_allclose(pipeline.finish(), reference)

    def test_max_frames_cap(self) -> None:
        config = MfccConfig(max_frames=3)
        pipeline = Pipeline(config)
        produced = pipeline.feed(_blocks(config, 10))
        self.assertEqual(produced, 3)
        self.assertTrue(pipeline.is_complete)
        self.assertEqual(pipeline.features.shape, (3, 13))
        with self.assertRaises(PipelineClosedError):
            pipeline.push(np.zeros(config.shift_samples))

    def test_vectors_match_sliding_windows(self) -> None:
        signal = _fake_signal(240 + 160 * 6)
        pipeline = Pipeline(self.config)
        features = pipeline.run(iter_blocks(signal, self.config))
        self.assertEqual(features.shape, (6, 13))
        for k in range(6):
            frame = signal[k * 160 : k * 160 + 400]
            np.testing.assert_allclose(features[k], pipeline.process_frame(frame))

    def test_extract_features_drops_partial_block(self) -> None:
        signal = _fake_signal(240 + 160 * 5 + 50)
        features = extract_features(signal, self.config)
        self.assertEqual(features.shape, (5, 13))

    def test_short_signal(self) -> None:
        features = extract_features(np.zeros(100), self.config)
        self.assertEqual(features.shape, (0, 13))

    def test_shared_tables(self) -> None:
        tables = resolve(self.config)
        a = Pipeline(tables=tables).run(_blocks(self.config, 3, seed=1))
        b = Pipeline(tables=tables).run(_blocks(self.config, 3, seed=1))
        np.testing.assert_array_equal(a, b)

    def test_mismatched_tables(self) -> None:
        with self.assertRaises(ConfigError):
            Pipeline(config=MfccConfig(num_filters=20), tables=resolve(self.config))

    def test_features_is_snapshot(self) -> None:
        pipeline = Pipeline(self.config)
        pipeline.feed(_blocks(self.config, 2))
        snapshot = pipeline.features
        snapshot[:] = 0.0
        self.assertFalse(np.all(pipeline.features == 0.0))


def run_toy_example() -> None:
    """Toy: extract features from one second of noise and print the first vector."""
    print("=== Toy example: MFCC pipeline ===\n")
    config = MfccConfig()
    features = extract_features(_fake_signal(config.sample_rate), config)
    print(f"Extracted {features.shape[0]} frames x {features.shape[1]} coefficients")
    print(f"First vector: {np.array2string(features[0], precision=3)}")
    print("Done.")


if __name__ == "__main__":
    run_toy_example()
    print("\n--- Running unit tests ---")
    unittest.main(argv=[""], exit=False, verbosity=2)
