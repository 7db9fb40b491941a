"""
Tests for molsim.similarity.metrics and molsim.similarity.matrix.

Run with: pytest tests/test_matrix.py -v
"""

import numpy as np
import pytest

rdkit = pytest.importorskip("rdkit")

from rdkit import Chem, DataStructs

from molsim.similarity.fingerprints import FingerprintAlgorithm, get_fingerprint
from molsim.similarity.matrix import build_matrix
from molsim.similarity.metrics import (
    SIMILARITY_METRICS,
    bulk_similarity,
    get_similarity_function,
    tanimoto_similarity,
)

TEST_SMILES = ["CCO", "CCCO", "c1ccccc1", "c1ccccc1O", "CC(=O)N", "CCN"]


def _fps(smiles):
    algo = FingerprintAlgorithm()
    return [get_fingerprint(Chem.MolFromSmiles(s), algo) for s in smiles]


class TestMetrics:
    """Tests for the Tanimoto metric."""

    def test_only_tanimoto_is_configured(self):
        assert list(SIMILARITY_METRICS) == ["tanimoto"]
        assert get_similarity_function("Tanimoto") is tanimoto_similarity

    def test_unknown_metric(self):
        with pytest.raises(ValueError, match="Unknown similarity metric"):
            get_similarity_function("dice")

    def test_callable_passthrough(self):
        def metric(a, b):
            return 0.5

        assert get_similarity_function(metric) is metric

    def test_self_similarity(self):
        fp = _fps(["CCO"])[0]
        assert tanimoto_similarity(fp, fp) == pytest.approx(1.0)

    def test_hand_computed(self):
        a = DataStructs.ExplicitBitVect(4)
        b = DataStructs.ExplicitBitVect(4)
        a.SetBitsFromList([0, 1])
        b.SetBitsFromList([0, 2])
        assert tanimoto_similarity(a, b) == pytest.approx(1 / 3)

    def test_bulk_similarity(self):
        fps = _fps(TEST_SMILES)
        sims = bulk_similarity(fps[0], fps)

        assert sims.shape == (len(TEST_SMILES),)
        assert sims[0] == pytest.approx(1.0)
        assert all(0.0 <= s <= 1.0 for s in sims)

    def test_bulk_similarity_empty_targets(self):
        fp = _fps(["CCO"])[0]
        assert bulk_similarity(fp, []).shape == (0,)


class TestBuildMatrix:
    """Tests for the dense similarity matrix."""

    def test_shape_and_cells(self):
        q = _fps(TEST_SMILES[:2])
        d = _fps(TEST_SMILES)
        m = build_matrix(q, d)

        assert m.shape == (2, len(TEST_SMILES))
        assert m.dtype == np.float64
        for i in range(2):
            for j in range(len(TEST_SMILES)):
                assert m[i, j] == pytest.approx(tanimoto_similarity(q[i], d[j]))

    def test_bounded_scores(self):
        fps = _fps(TEST_SMILES)
        m = build_matrix(fps, fps)
        assert np.all(m >= 0.0)
        assert np.all(m <= 1.0)
        assert np.allclose(np.diag(m), 1.0)

    @pytest.mark.parametrize("n_rows, n_cols", [(0, 3), (3, 0), (0, 0)])
    def test_degenerate_shapes(self, n_rows, n_cols):
        q = _fps(TEST_SMILES[:n_rows])
        d = _fps(TEST_SMILES[:n_cols])
        m = build_matrix(q, d)
        assert m.shape == (n_rows, n_cols)

    def test_not_required_to_be_square(self):
        m = build_matrix(_fps(["CCO"]), _fps(["CCO", "CCN", "CCC"]))
        assert m.shape == (1, 3)

    def test_callable_metric_called_once_per_cell(self):
        calls = []

        def metric(a, b):
            calls.append((int(a[0]), int(b[0])))
            return 0.25

        q = [np.array([i]) for i in range(3)]
        d = [np.array([j]) for j in range(4)]
        m = build_matrix(q, d, metric)

        assert m.shape == (3, 4)
        assert np.all(m == 0.25)
        assert sorted(calls) == [(i, j) for i in range(3) for j in range(4)]

    def test_out_of_range_metric_rejected(self):
        scores = iter([0.5, 1.5])

        def metric(a, b):
            return next(scores)

        with pytest.raises(ValueError, match=r"cell \(0, 1\)"):
            build_matrix([np.array([1])], [np.array([1]), np.array([1])], metric)

    def test_nan_metric_rejected(self):
        with pytest.raises(ValueError, match="expected a value in"):
            build_matrix([np.array([1])], [np.array([1])], lambda a, b: float("nan"))
