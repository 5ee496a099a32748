# run.py
import argparse
import logging
import subprocess
import sys
from pathlib import Path

import numpy as np
import uvicorn

from student_knn.config import load_config
from student_knn.data import (
    FEATURE_COLUMNS, TARGET_COLUMN,
    generate_students, save_to_csv, split_data, train_val_test_split, prepare_xy,
)
from student_knn.knn import KNNRegressor, ReferenceStore
from student_knn.server import create_app
from student_knn.utils import setup_logging

logger = logging.getLogger("student_knn.run")


def build_regressor(train_df, k):
    store = ReferenceStore.from_frame(train_df, FEATURE_COLUMNS, TARGET_COLUMN)
    return KNNRegressor(k=k, store=store)


def save_splits(df, outdir, val_size, test_size, seed):
    train, val, test = train_val_test_split(df, val_size=val_size, test_size=test_size, seed=seed)
    X_train, y_train = prepare_xy(train)
    X_val, y_val = prepare_xy(val)
    X_test, y_test = prepare_xy(test)
    splits_path = Path(outdir) / "splits.npz"
    np.savez(
        splits_path,
        X_train=X_train, y_train=y_train,
        X_val=X_val,     y_val=y_val,
        X_test=X_test,   y_test=y_test,
    )
    return splits_path


def run_module(module, splits_path, mode, k, k_grid, seed):
    cmd = [
        sys.executable, "-m", module,
        "--splits", str(splits_path),
        "--mode", mode,
        "--seed", str(seed),
    ]
    if mode == "fixed":
        cmd += ["--k", str(k)]
    else:
        cmd += ["--k-grid", k_grid]
    return subprocess.call(cmd)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Synthetic student data + k-NN final-score predictor")
    ap.add_argument("--mode", default="serve", choices=["serve", "fixed", "grid"])
    ap.add_argument("--config", type=str, help="JSON settings file (or $STUDENT_KNN_CONFIG)")
    ap.add_argument("--n-samples", type=int)
    ap.add_argument("--train-ratio", type=float)
    ap.add_argument("--k", type=int, help="neighbors (serve default / mode=fixed)")
    ap.add_argument("--k-grid", type=str, help="comma-separated ks for mode=grid (e.g., 1,3,5,7)")
    ap.add_argument("--seed", type=int, help="data seed; omit for a fresh dataset every run")
    ap.add_argument("--csv", type=str, help="where to write the generated students")
    ap.add_argument("--host", type=str)
    ap.add_argument("--port", type=int)
    ap.add_argument("--log-level", type=str)
    ap.add_argument("--val-size", type=float, default=0.15)
    ap.add_argument("--test-size", type=float, default=0.15)
    ap.add_argument("--eval-seed", type=int, default=42)
    ap.add_argument("--outdir", type=str, default="data/processed")
    args = ap.parse_args(argv)

    try:
        settings = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        ap.error(str(e))
    settings = settings.with_overrides(
        n_samples=args.n_samples, train_ratio=args.train_ratio, k=args.k, seed=args.seed,
        csv_path=args.csv, host=args.host, port=args.port, log_level=args.log_level,
    )

    # Basic arg checks
    if settings.k < 1:
        ap.error("--k must be a positive integer")
    if args.mode == "grid" and not args.k_grid:
        ap.error("--k-grid is required when --mode grid (e.g., 1,3,5,7,9)")

    setup_logging(settings.log_level)

    # 1. generate and persist
    df = generate_students(settings.n_samples, seed=settings.seed)
    save_to_csv(df, settings.csv_path)

    if args.mode == "serve":
        # 2. split, build the store from the training part
        train, _ = split_data(df, ratio=settings.train_ratio, seed=settings.seed)
        regressor = build_regressor(train, settings.k)
        logger.info(f"Reference store ready: {len(regressor.store)} students, k={settings.k}")

        # 3. web interface
        app = create_app(regressor, settings)
        logger.info(f"Open in a browser: http://localhost:{settings.port}")
        uvicorn.run(app, host=settings.host, port=int(settings.port), log_level=settings.log_level.lower())
        return 0

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    splits_path = save_splits(df, outdir, args.val_size, args.test_size, args.eval_seed)

    print("\n[run.py] Running my KNN model...")
    ret = run_module("student_knn.run_knn", splits_path, args.mode, settings.k, args.k_grid, args.eval_seed)
    if ret != 0:
        return ret

    print("\n[run.py] Running sklearn KNN baseline...")
    return run_module("student_knn.framework_knn", splits_path, args.mode, settings.k, args.k_grid, args.eval_seed)


if __name__ == "__main__":
    sys.exit(main())
