# student_knn/evaluation.py
import numpy as np
import matplotlib
matplotlib.use("Agg")  # Use non-interactive backend
import matplotlib.pyplot as plt

from .knn import KNNRegressor


# ---------- metrics ----------
def mse(y, yhat): return float(np.mean((np.asarray(y) - np.asarray(yhat))**2))
def mae(y, yhat): return float(np.mean(np.abs(np.asarray(y) - np.asarray(yhat))))
def rmse(y, yhat): return float(np.sqrt(mse(y, yhat)))
def r2(y, yhat):
    y = np.asarray(y, dtype=float)
    ss_res = np.sum((y - np.asarray(yhat))**2)
    ss_tot = np.sum((y - y.mean())**2)
    if ss_tot == 0:
        return float("nan")
    return float(1.0 - ss_res / ss_tot)


def report(y, yhat):
    return {"rmse": rmse(y, yhat), "mae": mae(y, yhat), "r2": r2(y, yhat)}


# ---------- k selection ----------
def pick_best_k(scores):
    """Lowest score wins; ties go to the smaller k."""
    return min(sorted(scores), key=lambda k: scores[k])


def grid_search_k(X_train, y_train, X_val, y_val, k_grid):
    """Validation MAE per k; returns (best_k, {k: mae}). Ties go to the smaller k."""
    if not k_grid:
        raise ValueError("k_grid must not be empty")
    model = KNNRegressor().fit(X_train, y_train)
    scores = {}
    for k in k_grid:
        scores[k] = mae(y_val, model.predict(X_val, k=k))
    return pick_best_k(scores), scores


# ---------- simple CV helpers ----------
def kfold_indices(n, k=5, seed=42):
    if k < 2 or k > n:
        raise ValueError(f"need 2 <= folds <= n, got folds={k}, n={n}")
    rng = np.random.default_rng(seed)
    idx = np.arange(n)
    rng.shuffle(idx)
    return np.array_split(idx, k)


def cross_val_mse(X, y, model_k, cv=5, seed=42):
    folds = kfold_indices(len(X), k=cv, seed=seed)
    mse_tr, mse_va = [], []
    for i in range(cv):
        val_idx = folds[i]
        train_idx = np.concatenate([folds[j] for j in range(cv) if j != i])
        Xtr, ytr = X[train_idx], y[train_idx]
        Xva, yva = X[val_idx], y[val_idx]
        model = KNNRegressor(k=model_k).fit(Xtr, ytr)
        mse_tr.append(mse(ytr, model.predict(Xtr)))
        mse_va.append(mse(yva, model.predict(Xva)))
    return np.mean(mse_tr), np.std(mse_tr), np.mean(mse_va), np.std(mse_va)


def validation_curve(X, y, k_grid, cv=5, seed=42):
    tr_mean, tr_std, va_mean, va_std = [], [], [], []
    for k in k_grid:
        m_tr, s_tr, m_va, s_va = cross_val_mse(X, y, model_k=k, cv=cv, seed=seed)
        tr_mean.append(m_tr); tr_std.append(s_tr)
        va_mean.append(m_va); va_std.append(s_va)
    return np.array(tr_mean), np.array(tr_std), np.array(va_mean), np.array(va_std)


def plot_curve(x, train, train_std, val, val_std, out_path, title, xlabel,
               baselines=None, labels=("Training", "Validation")):
    plt.figure()
    plt.plot(x, train, label=labels[0])
    plt.fill_between(x, train-train_std, train+train_std, alpha=0.2)
    plt.plot(x, val, label=labels[1])
    plt.fill_between(x, val-val_std, val+val_std, alpha=0.2)
    for name, value in (baselines or {}).items():
        plt.axhline(y=value, linestyle="--", label=name)
    plt.xlabel(xlabel)
    plt.ylabel("MSE")
    plt.title(title)
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.tight_layout()
    plt.savefig(out_path, dpi=150)
    plt.close()
    return out_path
