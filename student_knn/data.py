# student_knn/data.py
import logging
from pathlib import Path

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

COLUMNS = ["ID", "Attendance", "Homework", "TestScore", "FinalScore"]
FEATURE_COLUMNS = ["Attendance", "Homework", "TestScore"]
TARGET_COLUMN = "FinalScore"


def generate_students(n=200, seed=None):
    """Synthetic student records.

    Attendance ~ U(60, 100), Homework ~ U(50, 100), TestScore ~ U(50, 100) and
    FinalScore = 0.4*A + 0.3*H + 0.3*T + N(0, 5), clipped to [0, 100].
    seed=None draws fresh OS entropy, so every run differs.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    rng = np.random.default_rng(seed)
    attendance = rng.uniform(60, 100, n)
    homework = rng.uniform(50, 100, n)
    test_score = rng.uniform(50, 100, n)
    final = 0.4 * attendance + 0.3 * homework + 0.3 * test_score + rng.normal(0, 5, n)
    final = np.clip(final, 0, 100)
    return pd.DataFrame({
        "ID": np.arange(1, n + 1),
        "Attendance": attendance,
        "Homework": homework,
        "TestScore": test_score,
        "FinalScore": final,
    }, columns=COLUMNS)


def save_to_csv(df, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df[COLUMNS].to_csv(path, index=False, float_format="%.2f")
    logger.info("Saved %d students to %s", len(df), path)
    return path


def load_csv(path, required=COLUMNS):
    """Read a students CSV. Every column in `required` must be in the header."""
    df = pd.read_csv(path)
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: expected header with {list(required)}, got {list(df.columns)}")
    return df


def split_data(df, ratio=0.8, seed=None):
    """Shuffle rows, then cut at int(n * ratio). Returns (train, test)."""
    if not 0.0 <= ratio <= 1.0:
        raise ValueError(f"ratio must be in [0, 1], got {ratio}")
    rng = np.random.default_rng(seed)
    idx = np.arange(len(df))
    rng.shuffle(idx)
    n_train = int(len(df) * ratio)
    shuffled = df.iloc[idx].reset_index(drop=True)
    return shuffled.iloc[:n_train].reset_index(drop=True), shuffled.iloc[n_train:].reset_index(drop=True)


def prepare_xy(df):
    X = df[FEATURE_COLUMNS].to_numpy(dtype=float)
    y = df[TARGET_COLUMN].to_numpy(dtype=float)
    return X, y


def train_val_test_split(df, val_size=0.15, test_size=0.15, seed=42):
    rng = np.random.default_rng(seed)
    n = len(df)
    idx = np.arange(n)
    rng.shuffle(idx)
    df = df.iloc[idx].reset_index(drop=True)

    n_test = int(test_size * n)
    n_val  = int(val_size * n)
    n_train = n - n_val - n_test
    if n_train < 1:
        raise ValueError(f"val_size + test_size leaves no training rows (n={n})")

    train = df.iloc[:n_train].reset_index(drop=True)
    val   = df.iloc[n_train:n_train+n_val].reset_index(drop=True)
    test  = df.iloc[n_train+n_val:].reset_index(drop=True)
    return train, val, test
