"""
Tests for the scratch-model runner CLI.
"""

import numpy as np
import pandas as pd
import pytest

from student_knn import run_knn


@pytest.fixture
def splits_path(tmp_path):
    X = np.array([[90.0, 80.0, 70.0], [60.0, 60.0, 60.0], [95.0, 90.0, 85.0]])
    y = np.array([82.0, 60.0, 91.0])
    path = tmp_path / "splits.npz"
    np.savez(path, X_train=X, y_train=y, X_val=X, y_val=y, X_test=X, y_test=y)
    return path


def test_predict_mode_reads_feature_csv(tmp_path, splits_path, monkeypatch):
    monkeypatch.setattr(run_knn, "results_dir", lambda: tmp_path)
    queries = tmp_path / "queries.csv"
    queries.write_text("Attendance,Homework,TestScore\n92,85,80\n")

    assert run_knn.main(["--splits", str(splits_path), "--mode", "predict",
                         "--k", "2", "--predict-csv", str(queries)]) == 0

    out = pd.read_csv(tmp_path / "predictions_myKNN.csv")
    assert out["prediction"].tolist() == pytest.approx([86.5])


def test_predict_mode_rejects_csv_without_features(tmp_path, splits_path):
    queries = tmp_path / "queries.csv"
    queries.write_text("a,b\n1,2\n")
    with pytest.raises(ValueError, match="expected header"):
        run_knn.main(["--splits", str(splits_path), "--mode", "predict",
                      "--k", "2", "--predict-csv", str(queries)])
