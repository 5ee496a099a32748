import math
import numpy as np


class KNNError(ValueError):
    """Base class for caller-input errors raised by the regressor."""


class DimensionMismatch(KNNError):
    pass


class EmptyReferenceStore(KNNError):
    pass


class InvalidK(KNNError):
    pass


class NonFiniteQuery(KNNError):
    pass


def _check_k(k):
    # bool is an int subclass; True is not a neighbor count
    if isinstance(k, (bool, np.bool_)) or not isinstance(k, (int, np.integer)):
        raise InvalidK(f"k must be a positive integer, got {k!r}")
    if k < 1:
        raise InvalidK(f"k must be a positive integer, got {k}")
    return int(k)


def euclidean_distance(a, b):
    a = np.asarray(a, dtype=float).ravel()
    b = np.asarray(b, dtype=float).ravel()
    if a.shape != b.shape:
        raise DimensionMismatch(f"cannot compare vectors of length {a.size} and {b.size}")
    diff = a - b
    return float(np.sqrt(np.sum(diff * diff)))


class ReferenceStore:
    """Read-only (features, label) pairs used as neighbor candidates.

    Row order is kept exactly as given; the regressor's tie-break relies on it.
    The arrays are copies with the write flag cleared, so a store can be shared
    by concurrent predictions without locking.
    """

    def __init__(self, features, labels, n_features=None):
        X = np.array(features, dtype=float)
        y = np.array(labels, dtype=float)
        if X.size == 0 and X.ndim != 2:
            # keep the declared width so an empty store still knows its shape
            X = X.reshape(0, n_features if n_features is not None else 0)
        if X.ndim != 2:
            raise DimensionMismatch(f"features must be 2-D, got shape {X.shape}")
        if y.ndim != 1 or y.shape[0] != X.shape[0]:
            raise DimensionMismatch(
                f"got {X.shape[0]} feature rows but labels of shape {y.shape}"
            )
        if n_features is not None and X.shape[1] != n_features:
            raise DimensionMismatch(f"expected {n_features} features, got {X.shape[1]}")
        if not (np.all(np.isfinite(X)) and np.all(np.isfinite(y))):
            raise ValueError("reference data must be finite")
        X.setflags(write=False)
        y.setflags(write=False)
        # views of read-only bases cannot be flipped back to writeable
        self._X = X.view()
        self._y = y.view()

    @classmethod
    def from_points(cls, points, n_features=None):
        points = list(points)
        if not points:
            return cls(np.empty((0, n_features or 0)), np.empty(0), n_features=n_features)
        widths = {len(f) for f, _ in points}
        if len(widths) != 1:
            raise DimensionMismatch(f"points have mixed lengths {sorted(widths)}")
        return cls([f for f, _ in points], [label for _, label in points], n_features=n_features)

    @classmethod
    def from_frame(cls, df, feature_columns, label_column):
        feature_columns = list(feature_columns)
        return cls(
            df[feature_columns].to_numpy(dtype=float),
            df[label_column].to_numpy(dtype=float),
            n_features=len(feature_columns),
        )

    @property
    def features(self):
        return self._X

    @property
    def labels(self):
        return self._y

    @property
    def n_features(self):
        return self._X.shape[1]

    def __len__(self):
        return self._X.shape[0]

    def __iter__(self):
        for row, label in zip(self._X, self._y):
            yield tuple(row.tolist()), float(label)

    def __repr__(self):
        return f"ReferenceStore(n={len(self)}, n_features={self.n_features})"


class KNNRegressor:
    def __init__(self, k=5, distance="euclidean", store=None):
        self.k = _check_k(k)
        if distance != "euclidean":
            raise ValueError("Only euclidean distance implemented in this simple version.")
        self.distance = distance
        self.store = store

    def fit(self, X, y):
        # lazy learner: fitting is just storing the reference set
        self.store = ReferenceStore(X, y)
        return self

    def _distances(self, q):
        # explicit differences keep d(a, a) == 0 exactly
        diff = self.store.features - q
        return np.sqrt(np.sum(diff * diff, axis=1))

    def predict_one(self, query, k=None):
        if self.store is None or len(self.store) == 0:
            raise EmptyReferenceStore("no reference data to predict from")
        q = np.asarray(query, dtype=float)
        if q.ndim != 1 or q.shape[0] != self.store.n_features:
            raise DimensionMismatch(
                f"query has shape {q.shape}, store expects {self.store.n_features} features"
            )
        if not np.all(np.isfinite(q)):
            raise NonFiniteQuery(f"query must be finite, got {q.tolist()}")
        k = self.k if k is None else _check_k(k)

        D = self._distances(q)                       # [n_train]
        order = np.argsort(D, kind="stable")         # ties keep store order
        kk = min(k, order.shape[0])
        nearest = self.store.labels[order[:kk]]
        return math.fsum(nearest.tolist()) / kk

    def predict(self, X, k=None):
        X = np.asarray(X, dtype=float)
        if X.ndim == 1:
            X = X.reshape(1, -1)
        return np.array([self.predict_one(row, k=k) for row in X], dtype=float)
