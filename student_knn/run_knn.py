# student_knn/run_knn.py
import argparse
import numpy as np
import pandas as pd

from .knn import KNNRegressor
from .data import FEATURE_COLUMNS, load_csv
from .evaluation import mae, report, grid_search_k, validation_curve, plot_curve
from .utils import parse_grid, results_dir


def load_splits(path):
    data = np.load(path, allow_pickle=False)
    return (data["X_train"], data["y_train"],
            data["X_val"], data["y_val"],
            data["X_test"], data["y_test"])


def print_report(title, y_test, test_pred):
    scores = report(y_test, test_pred)
    print(title)
    print(f"Test RMSE: {scores['rmse']:,.2f}")
    print(f"Test MAE : {scores['mae']:,.2f}")
    print(f"Test R^2 : {scores['r2']:,.4f}")


# ---------- main pipeline ----------
def main(argv=None):
    ap = argparse.ArgumentParser(description="Scratch k-NN regressor on student splits")
    ap.add_argument("--splits", required=True, help="Path to splits .npz from run.py")
    ap.add_argument("--mode", required=True, choices=["fixed", "grid", "predict"])
    ap.add_argument("--k", type=int, help="k for mode=fixed/predict")
    ap.add_argument("--k-grid", type=str, help="comma-separated ks for mode=grid (e.g., 1,3,5,7)")
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--cv", type=int, default=5)
    ap.add_argument("--predict-csv", type=str, help="CSV with Attendance,Homework,TestScore (predict mode)")
    args = ap.parse_args(argv)

    if args.mode in ("fixed", "predict") and args.k is None:
        ap.error(f"--k is required for --mode {args.mode}")
    if args.mode == "grid" and not args.k_grid:
        ap.error("--k-grid is required when --mode grid")
    if args.mode == "predict" and not args.predict_csv:
        ap.error("--predict-csv is required for --mode predict")
    if args.k is not None and args.k < 1:
        ap.error("--k must be a positive integer")

    X_train, y_train, X_val, y_val, X_test, y_test = load_splits(args.splits)

    if args.mode == "predict":
        model = KNNRegressor(k=args.k).fit(X_train, y_train)
        df_pred = load_csv(args.predict_csv, required=FEATURE_COLUMNS)
        X_new = df_pred[FEATURE_COLUMNS].to_numpy(dtype=float)
        y_hat = model.predict(X_new)

        out = results_dir() / "predictions_myKNN.csv"
        pd.DataFrame({"prediction": y_hat}).to_csv(out, index=False)
        print(f"[My Model] Saved predictions → {out}")
        return 0

    if args.mode == "fixed":
        model = KNNRegressor(k=args.k).fit(X_train, y_train)
        print(f"k={args.k:>2} | val MAE={mae(y_val, model.predict(X_val)):,.2f}")
        print_report("\n[My Model] Fixed-k results", y_test, model.predict(X_test))
        return 0

    # grid
    k_grid = parse_grid(args.k_grid)
    best_k, scores = grid_search_k(X_train, y_train, X_val, y_val, k_grid)
    for k in k_grid:
        print(f"k={k:>2} | val MAE={scores[k]:,.2f}")

    final = KNNRegressor(k=best_k).fit(X_train, y_train)
    print(f"\nBest k: {best_k}")
    print_report("[My Model] Grid-search results (best-k on test)", y_test, final.predict(X_test))

    # ---- Validation curve on train+val ----
    X_tv = np.vstack([X_train, X_val])
    y_tv = np.concatenate([y_train, y_val])
    tr_mean, tr_std, va_mean, va_std = validation_curve(X_tv, y_tv, k_grid, cv=args.cv, seed=args.seed)
    out_path = plot_curve(
        k_grid, tr_mean, tr_std, va_mean, va_std,
        results_dir() / "validationCurve_myKNN_grid.png",
        title="Validation curve - MyKNN", xlabel="Number of neighbors (k)",
        labels=("Training (MyKNN)", "Validation (MyKNN)"),
    )
    print(f"[My Model] Saved validation curve → {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
