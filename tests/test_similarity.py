"""Unit tests for cosine similarity and the self-similarity matrix."""

from __future__ import annotations

import unittest

import numpy as np

from mfcc_similarity.errors import DegenerateVectorError
from mfcc_similarity.similarity import (
    SimilarityMatrixBuilder,
    build_similarity_matrix,
    cosine_distance,
    cosine_similarity,
)


class TestCosine(unittest.TestCase):
    """Tests for cosine_similarity / cosine_distance."""

    def setUp(self) -> None:
        self.rng = np.random.default_rng(11)

    def test_self_similarity_is_one(self) -> None:
        for _ in range(50):
            v = self.rng.standard_normal(13) * self.rng.uniform(1e-3, 1e3)
            self.assertAlmostEqual(cosine_similarity(v, v), 1.0, delta=1e-9)

    def test_symmetric_distance(self) -> None:
        a, b = self.rng.standard_normal((2, 13))
        self.assertAlmostEqual(cosine_distance(a, b), cosine_distance(b, a), delta=1e-12)

    def test_distance_range(self) -> None:
        v = self.rng.standard_normal(13)
        self.assertAlmostEqual(cosine_distance(v, -v), 2.0, delta=1e-12)
        self.assertAlmostEqual(cosine_distance(v, 3 * v), 0.0, delta=1e-12)

    def test_orthogonal(self) -> None:
        self.assertAlmostEqual(cosine_distance([1.0, 0.0], [0.0, 2.0]), 1.0)

    def test_zero_vector(self) -> None:
        with self.assertRaises(DegenerateVectorError):
            cosine_similarity(np.zeros(13), np.ones(13))
        with self.assertRaises(DegenerateVectorError):
            cosine_distance(np.ones(13), np.zeros(13))


class TestSimilarityMatrix(unittest.TestCase):
    """Tests for SimilarityMatrixBuilder and SimilarityMatrix."""

    def setUp(self) -> None:
        rng = np.random.default_rng(5)
        self.features = rng.standard_normal((9, 13))

    def test_ragged_layout(self) -> None:
        matrix = build_similarity_matrix(self.features, anchor_count=4)
        self.assertEqual(len(matrix), 9 + 8 + 7 + 6)
        k = 0
        for j in range(4):
            for i in range(j, 9):
                self.assertEqual(matrix.index(j, i), k)
                self.assertAlmostEqual(
                    matrix.values[k],
                    cosine_distance(self.features[j], self.features[i]),
                    delta=1e-12,
                )
                k += 1

    def test_values_in_range_and_diagonal_zero(self) -> None:
        matrix = build_similarity_matrix(self.features, anchor_count=9)
        self.assertTrue(np.all(matrix.values >= 0.0))
        self.assertTrue(np.all(matrix.values <= 2.0))
        for j in range(9):
            self.assertAlmostEqual(matrix.distance(j, j), 0.0, delta=1e-12)

    def test_distance_either_order(self) -> None:
        matrix = build_similarity_matrix(self.features, anchor_count=3)
        self.assertEqual(matrix.distance(1, 7), matrix.distance(7, 1))
        with self.assertRaises(IndexError):
            matrix.distance(5, 7)  # neither frame is an anchor

    def test_threaded_matches_sequential(self) -> None:
        sequential = SimilarityMatrixBuilder().build(self.features, 6)
        threaded = SimilarityMatrixBuilder(workers=4).build(self.features, 6)
        np.testing.assert_array_equal(sequential.values, threaded.values)

    def test_to_dense(self) -> None:
        matrix = build_similarity_matrix(self.features, anchor_count=3)
        dense = matrix.to_dense()
        self.assertEqual(dense.shape, (3, 9))
        self.assertTrue(np.isnan(dense[2, 0]))
        self.assertEqual(dense[1, 4], matrix.distance(1, 4))
        np.testing.assert_array_equal(matrix.row(2), dense[2, 2:])

    def test_no_anchors(self) -> None:
        matrix = build_similarity_matrix(self.features, anchor_count=0)
        self.assertEqual(len(matrix), 0)

    def test_too_many_anchors(self) -> None:
        with self.assertRaises(ValueError):
            build_similarity_matrix(self.features, anchor_count=10)

    def test_degenerate_vector_reported(self) -> None:
        features = self.features.copy()
        features[5] = 0.0
        with self.assertRaises(DegenerateVectorError) as ctx:
            build_similarity_matrix(features, anchor_count=2)
        self.assertEqual(ctx.exception.indices, (0, 5))
        with self.assertRaises(DegenerateVectorError):
            SimilarityMatrixBuilder(workers=2).build(features, anchor_count=3)

    def test_threaded_error_reports_lowest_anchor(self) -> None:
        features = self.features.copy()
        features[3] = 0.0
        features[1] = 0.0
        for _ in range(20):
            with self.assertRaises(DegenerateVectorError) as ctx:
                SimilarityMatrixBuilder(workers=4).build(features, anchor_count=6)
            self.assertEqual(ctx.exception.indices, (0, 1))

    def test_identity_equality_and_hash(self) -> None:
        a = build_similarity_matrix(self.features, anchor_count=2)
        b = build_similarity_matrix(self.features, anchor_count=2)
        self.assertEqual(a, a)
        self.assertNotEqual(a, b)
        self.assertEqual(len({a, b}), 2)

    def test_invalid_workers(self) -> None:
        with self.assertRaises(ValueError):
            SimilarityMatrixBuilder(workers=0)


if __name__ == "__main__":
    unittest.main()
