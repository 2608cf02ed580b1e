"""
Local regression (LOESS) smoothing.

Fits a low-degree polynomial by weighted least squares in a neighborhood of
each evaluation point. The neighborhood holds ``floor(span * n)`` points and
observations are weighted with the tricube kernel of their distance, scaled
by the distance to the farthest neighbor.
"""

from typing import Optional

import numpy as np


class LoessFit:
    """
    LOESS model of ``y ~ x`` with direct (exact) local evaluation.

    Parameters
    ----------
    x : np.ndarray
        Predictor values (e.g. sample positions 1..N).
    y : np.ndarray
        Response values, same length as ``x``.
    span : float
        Fraction of points in each local neighborhood.
    degree : int
        Local polynomial degree (0, 1 or 2).
    """

    def __init__(self, x, y, span: float = 0.75, degree: int = 2):
        self.x = np.asarray(x, dtype=np.float64)
        self.y = np.asarray(y, dtype=np.float64)

        if self.x.shape != self.y.shape or self.x.ndim != 1:
            raise ValueError("x and y must be 1-D arrays of equal length")
        if degree not in (0, 1, 2):
            raise ValueError(f"degree must be 0, 1 or 2, got {degree}")
        if span <= 0:
            raise ValueError(f"span must be positive, got {span}")

        self.span = float(span)
        self.degree = int(degree)

        n = len(self.x)
        self.n_local = int(np.floor(n * min(self.span, 1.0)))
        if self.n_local < self.degree + 1:
            raise ValueError(
                f"span too small: {self.n_local} neighbors for degree {self.degree} ({n} points)"
            )

        self._fitted: Optional[np.ndarray] = None

    def _bandwidth(self, distances: np.ndarray) -> float:
        rho = np.partition(distances, self.n_local - 1)[self.n_local - 1]
        # span > 1 enlarges the neighborhood beyond the data range
        return float(rho * max(1.0, self.span))

    def predict_one(self, x0: float) -> float:
        """Evaluate the local fit at a single point (NaN outside the data range)."""
        x0 = float(x0)
        if x0 < self.x.min() or x0 > self.x.max():
            return np.nan

        distances = np.abs(self.x - x0)
        rho = self._bandwidth(distances)

        if rho > 0:
            u = distances / rho
            weights = np.where(u < 1.0, (1.0 - u ** 3) ** 3, 0.0)
        else:
            weights = (distances == 0).astype(np.float64)

        mask = weights > 0
        dx = self.x[mask] - x0
        design = np.vander(dx, self.degree + 1, increasing=True)
        sqrt_w = np.sqrt(weights[mask])

        coef, *_ = np.linalg.lstsq(design * sqrt_w[:, None], self.y[mask] * sqrt_w, rcond=None)
        return float(coef[0])

    def predict(self, x_new) -> np.ndarray:
        """Evaluate the local fit at each point of ``x_new``, in order."""
        return np.array([self.predict_one(v) for v in np.atleast_1d(x_new)], dtype=np.float64)

    @property
    def fitted(self) -> np.ndarray:
        """Fitted values at the observed predictor values."""
        if self._fitted is None:
            self._fitted = self.predict(self.x)
        return self._fitted

    @property
    def residuals(self) -> np.ndarray:
        """Observed minus fitted values."""
        return self.y - self.fitted


def loess_smooth(
    y: np.ndarray,
    span: float = 0.75,
    degree: int = 2,
) -> np.ndarray:
    """Smooth ``y`` against its 1-based sample positions."""
    y = np.asarray(y, dtype=np.float64)
    x = np.arange(1, len(y) + 1, dtype=np.float64)
    return LoessFit(x, y, span=span, degree=degree).fitted
