# student_knn/framework_knn.py
import argparse
import numpy as np

from sklearn.neighbors import KNeighborsRegressor
from sklearn.model_selection import learning_curve, validation_curve, KFold
from sklearn.dummy import DummyRegressor

from .evaluation import mae, pick_best_k, plot_curve
from .run_knn import load_splits, print_report
from .utils import parse_grid, results_dir


def make_baseline(k):
    # brute force + uniform weights is the same estimator as KNNRegressor
    return KNeighborsRegressor(n_neighbors=k, algorithm="brute", weights="uniform")


def grid_search_baseline(X_train, y_train, X_val, y_val, k_grid):
    """Same selection rule as evaluation.grid_search_k, with sklearn models."""
    if not k_grid:
        raise ValueError("k_grid must not be empty")
    scores = {}
    for k in k_grid:
        model = make_baseline(k).fit(X_train, y_train)
        scores[k] = mae(y_val, model.predict(X_val))
    return pick_best_k(scores), scores


def dummy_cv_mse(X, y, cv, strategy):
    dummy = DummyRegressor(strategy=strategy)
    scores = []
    for tr_idx, te_idx in cv.split(X):
        dummy.fit(X[tr_idx], y[tr_idx])
        yhat = dummy.predict(X[te_idx])
        scores.append(np.mean((y[te_idx] - yhat) ** 2))
    return float(np.mean(scores))


def main(argv=None):
    ap = argparse.ArgumentParser(description="scikit-learn k-NN baseline on student splits")
    ap.add_argument("--splits", required=True, help="Path to splits .npz from run.py")
    ap.add_argument("--mode", required=True, choices=["fixed", "grid"])
    ap.add_argument("--k", type=int, help="k for mode=fixed")
    ap.add_argument("--k-grid", type=str, help="comma-separated ks for mode=grid (e.g., 1,3,5,7)")
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--cv", type=int, default=5, help="CV folds for curves (default: 5)")
    args = ap.parse_args(argv)

    if args.mode == "fixed" and args.k is None:
        ap.error("--k is required when --mode fixed")
    if args.mode == "grid" and not args.k_grid:
        ap.error("--k-grid is required when --mode grid")

    X_train, y_train, X_val, y_val, X_test, y_test = load_splits(args.splits)

    # train+val for CV-based curves; test stays untouched for the final report
    X_tv = np.vstack([X_train, X_val])
    y_tv = np.concatenate([y_train, y_val])
    cv = KFold(n_splits=args.cv, shuffle=True, random_state=args.seed)

    if args.mode == "fixed":
        k = args.k
        model = make_baseline(k).fit(X_train, y_train)
        print(f"k={k:>2} | val MAE={mae(y_val, model.predict(X_val)):,.2f}")
        print_report("\n[Sklearn] Fixed-k results", y_test, model.predict(X_test))

        # scoring is neg MSE -> flip sign to MSE
        sizes_abs, tr_scores, va_scores = learning_curve(
            estimator=make_baseline(k),
            X=X_tv, y=y_tv,
            train_sizes=np.linspace(0.1, 1.0, 10),
            cv=cv,
            scoring="neg_mean_squared_error",
            shuffle=True,
            random_state=args.seed
        )
        out_path = plot_curve(
            sizes_abs,
            -np.mean(tr_scores, axis=1), np.std(tr_scores, axis=1),
            -np.mean(va_scores, axis=1), np.std(va_scores, axis=1),
            results_dir() / "learningCurve_withFramework_fixedk.png",
            title=f"Learning curve - KNN (k={k})",
            xlabel="Training set size (students)",
            baselines={
                "Dummy (mean)": dummy_cv_mse(X_tv, y_tv, cv, "mean"),
                "Dummy (median)": dummy_cv_mse(X_tv, y_tv, cv, "median"),
            },
            labels=("Training (KNN)", "Validation (KNN)"),
        )
        print(f"[Sklearn] Saved learning curve → {out_path}")
        return 0

    k_grid = parse_grid(args.k_grid)
    best_k, scores = grid_search_baseline(X_train, y_train, X_val, y_val, k_grid)
    for k in k_grid:
        print(f"k={k:>2} | val MAE={scores[k]:,.2f}")

    final = make_baseline(best_k).fit(X_train, y_train)
    print(f"\nBest k: {best_k}")
    print_report("[Sklearn] Grid-search results (best-k on test)", y_test, final.predict(X_test))

    param_range = np.array(k_grid, dtype=int)
    # arrays are [len(param_range), n_splits]
    tr_scores, va_scores = validation_curve(
        estimator=make_baseline(1),
        X=X_tv, y=y_tv,
        param_name="n_neighbors",
        param_range=param_range,
        cv=cv,
        scoring="neg_mean_squared_error",
    )
    out_path = plot_curve(
        param_range,
        -np.mean(tr_scores, axis=1), np.std(tr_scores, axis=1),
        -np.mean(va_scores, axis=1), np.std(va_scores, axis=1),
        results_dir() / "validationCurve_withFramework_gridk.png",
        title="Validation curve - KNN (MSE vs k)",
        xlabel="Number of neighbors (k)",
    )
    print(f"[Sklearn] Saved validation curve → {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
