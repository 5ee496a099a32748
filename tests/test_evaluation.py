"""
Tests for metrics and k-selection helpers.
"""

import numpy as np
import pytest

from student_knn.evaluation import (
    cross_val_mse,
    grid_search_k,
    kfold_indices,
    mae,
    mse,
    pick_best_k,
    plot_curve,
    r2,
    rmse,
    validation_curve,
)
from student_knn.framework_knn import grid_search_baseline
from student_knn.utils import parse_grid


class TestMetrics:

    def test_hand_computed(self):
        y = np.array([1.0, 2.0, 3.0])
        yhat = np.array([1.0, 2.0, 5.0])
        assert mse(y, yhat) == pytest.approx(4.0 / 3)
        assert mae(y, yhat) == pytest.approx(2.0 / 3)
        assert rmse(y, yhat) == pytest.approx(np.sqrt(4.0 / 3))
        assert r2(y, yhat) == pytest.approx(1.0 - 4.0 / 2.0)

    def test_perfect_fit(self):
        y = np.array([3.0, 1.0, 4.0])
        assert r2(y, y) == 1.0
        assert mae(y, y) == 0.0

    def test_r2_constant_target(self):
        assert np.isnan(r2([2.0, 2.0], [1.0, 3.0]))


def test_kfold_covers_every_index():
    folds = kfold_indices(23, k=5, seed=0)
    assert len(folds) == 5
    assert sorted(np.concatenate(folds).tolist()) == list(range(23))


def test_kfold_rejects_bad_fold_count():
    with pytest.raises(ValueError):
        kfold_indices(3, k=5)


def test_grid_search_prefers_smaller_k_on_tie():
    X = np.array([[0.0, 0.0, 0.0], [10.0, 10.0, 10.0]])
    y = np.array([5.0, 5.0])
    best, scores = grid_search_k(X, y, X, y, [3, 1, 2])
    assert best == 1
    assert set(scores) == {1, 2, 3}


def test_grid_search_picks_k_one_on_training_data():
    rng = np.random.default_rng(0)
    X = rng.uniform(size=(30, 3))
    y = rng.uniform(size=30)
    best, scores = grid_search_k(X, y, X, y, [1, 5, 9])
    assert best == 1
    assert scores[1] == 0.0


def test_cross_val_and_curve(tmp_path):
    rng = np.random.default_rng(1)
    X = rng.uniform(50, 100, size=(40, 3))
    y = X @ np.array([0.4, 0.3, 0.3])
    tr_mean, tr_std, va_mean, va_std = cross_val_mse(X, y, model_k=1, cv=4, seed=0)
    assert tr_mean == 0.0
    assert va_mean > 0.0

    curves = validation_curve(X, y, [1, 3], cv=4, seed=0)
    assert all(c.shape == (2,) for c in curves)
    out = plot_curve([1, 3], *curves, tmp_path / "curve.png", title="t", xlabel="k")
    assert out.exists()


def test_parse_grid():
    assert parse_grid("1, 3,5,,7") == [1, 3, 5, 7]


def test_pick_best_k_breaks_ties_by_smaller_k():
    assert pick_best_k({7: 1.0, 3: 1.0, 5: 2.0}) == 3


def test_scratch_and_sklearn_grid_agree_on_ties():
    X = np.array([[0.0, 0.0, 0.0], [10.0, 0.0, 0.0], [0.0, 10.0, 0.0], [0.0, 0.0, 10.0]])
    y = np.full(4, 5.0)
    ours, _ = grid_search_k(X, y, X, y, [3, 1, 2])
    theirs, scores = grid_search_baseline(X, y, X, y, [3, 1, 2])
    assert ours == theirs == 1
    assert set(scores.values()) == {0.0}
