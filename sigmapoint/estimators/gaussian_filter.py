"""
Sigma-point Gaussian filter.

This module implements a Gaussian filter for nonlinear models with
non-additive noise, using a point-set transform (e.g. the unscented
transform) instead of Jacobians.

The state, process noise and observation noise are treated as blocks of one
augmented Gaussian

    [ P  0  0 ]
    [ 0  Q  0 ]
    [ 0  0  R ]

of global dimension D = dim(P) + dim(Q) + dim(R). Each block is transformed
separately into a point set of the same global number of points, so that the
point index i refers to the same sigma direction in all three point sets.
Since the models take standard normal noise, the noise point sets X_Q and X_R
are computed once at construction.

Prediction:
    X_r    = transform(prior)
    X_r[i] = f(dt, X_r[i], X_Q[i], u)
    mu     = Σ w_mean[i] X_r[i]
    P      = X diag(W) X^T                     X = centered X_r

Update:
    X_r    = transform(predicted)
    X_y[i] = h(X_r[i], X_R[i])
    P_xx   = X diag(W) X^T
    P_yy   = Y diag(W) Y^T                     Y = centered X_y
    P_xy   = X diag(W) Y^T
    K      = P_xy P_yy^{-1}
    mu     = mu_r + K (y - mu_y)
    P      = P_xx - K P_yy K^T
"""

from dataclasses import dataclass
from typing import Optional
import warnings

import numpy as np

from sigmapoint.distributions.gaussian import Gaussian
from sigmapoint.estimators.base import GaussianFilterInterface, PointSetTransform
from sigmapoint.estimators.point_set import PointSet
from sigmapoint.exceptions import (
    DimensionMismatchError,
    NumericalWarning,
    SingularInnovationCovarianceError,
)
from sigmapoint.models.interfaces import ObservationModel, ProcessModel
from sigmapoint.utils.linalg import symmetrize


SINGULAR_POLICIES = ("raise", "pinv")


@dataclass(frozen=True)
class OutlierGuard:
    """
    Innovation covariance inflation for outlying observations.

    For every observation component k with |innovation[k]| > threshold the
    innovation covariance is inflated by P_yy[k, k] += inv_sigma, which damps
    the gain for that component. This is a heuristic, not a robust estimator;
    both values are application specific tuning parameters in observation
    units (threshold) and squared observation units (inv_sigma).

    The default disables the guard.

    Attributes:
        threshold: Innovation magnitude above which a component is inflated.
        inv_sigma: Variance added to the diagonal of P_yy.
    """

    threshold: float = np.inf
    inv_sigma: float = 0.0

    def __post_init__(self) -> None:
        """Validate the guard parameters."""
        if not self.threshold > 0:
            raise ValueError(f"Outlier threshold must be positive, got {self.threshold}")
        if not self.inv_sigma >= 0:
            raise ValueError(f"Inflation inv_sigma must be non-negative, got {self.inv_sigma}")


@dataclass
class FilterWorkspace:
    """
    Scratch buffers of one GaussianFilter.

    The buffers are owned by a single filter instance and overwritten by every
    predict/update call. A filter must therefore not be used from two threads
    at once, and references into the workspace must not be kept across calls.

    Attributes:
        X_r: State points.
        X_y: Observation points.
        X_Q: Process noise points (constant after construction).
        X_R: Observation noise points (constant after construction).
        W: Covariance weights of the last call.
        X: Centered state points of the last call.
        Y: Centered observation points of the last update.
        prediction: Predicted observation mean of the last update.
        innovation: Innovation of the last update.
        cov_xx, cov_yy, cov_xy: Moments of the last update. cov_yy includes
            the outlier guard inflation.
        gain: Kalman gain of the last update.
    """

    X_r: PointSet
    X_y: PointSet
    X_Q: PointSet
    X_R: PointSet
    W: Optional[np.ndarray] = None
    X: Optional[np.ndarray] = None
    Y: Optional[np.ndarray] = None
    prediction: Optional[np.ndarray] = None
    innovation: Optional[np.ndarray] = None
    cov_xx: Optional[np.ndarray] = None
    cov_yy: Optional[np.ndarray] = None
    cov_xy: Optional[np.ndarray] = None
    gain: Optional[np.ndarray] = None


class GaussianFilter(GaussianFilterInterface):
    """
    Sigma-point Kalman filter with augmented (non-additive) noise.

    With an UnscentedTransform this is the augmented Unscented Kalman Filter.

    Attributes:
        threshold: Outlier guard threshold (see OutlierGuard).
        inv_sigma: Outlier guard inflation (see OutlierGuard).
        singular_policy: "raise" or "pinv", see update().
        max_condition_number: Largest acceptable condition number of P_yy.
        workspace: Scratch point sets and intermediate results.

    Example:
        >>> process = ConstantVelocityProcessModel(spatial_dim=2, q=0.1)
        >>> sensor = RangeObservationModel(anchors, sigma=0.3)
        >>> ukf = GaussianFilter(process, sensor, UnscentedTransform())
        >>> belief = Gaussian(mean=x0, covariance=P0)
        >>> belief = ukf.predict_and_update(dt, None, ranges, belief)
    """

    def __init__(
        self,
        process_model: ProcessModel,
        observation_model: ObservationModel,
        point_set_transform: PointSetTransform,
        outlier_guard: Optional[OutlierGuard] = None,
        singular_policy: str = "raise",
        max_condition_number: float = 1e12,
    ):
        """
        Create a Gaussian filter.

        Args:
            process_model: Process model f(dt, x, w, u).
            observation_model: Observation model h(x, v, dt).
            point_set_transform: Point-set transform, e.g. UnscentedTransform.
            outlier_guard: Innovation covariance inflation. Disabled if None.
            singular_policy: Handling of a numerically singular innovation
                covariance: "raise" raises SingularInnovationCovarianceError,
                "pinv" warns and uses the pseudo-inverse.
            max_condition_number: Condition number of P_yy above which it is
                treated as singular.

        Raises:
            ValueError: If singular_policy or max_condition_number is invalid.
        """
        if singular_policy not in SINGULAR_POLICIES:
            raise ValueError(
                f"singular_policy must be one of {SINGULAR_POLICIES}, got {singular_policy!r}"
            )
        if not max_condition_number > 1:
            raise ValueError(
                f"max_condition_number must be greater than 1, got {max_condition_number}"
            )

        self._process_model = process_model
        self._observation_model = observation_model
        self._point_set_transform = point_set_transform

        guard = outlier_guard if outlier_guard is not None else OutlierGuard()
        self.threshold = guard.threshold
        self.inv_sigma = guard.inv_sigma
        self.singular_policy = singular_policy
        self.max_condition_number = max_condition_number

        state_dim = process_model.state_dimension()
        state_noise_dim = process_model.noise_dimension()
        obsrv_noise_dim = observation_model.noise_dimension()

        # Dimension of the augmented Gaussian [P 0 0; 0 Q 0; 0 0 R]
        self._global_dimension = state_dim + state_noise_dim + obsrv_noise_dim

        point_count = point_set_transform.number_of_points(self._global_dimension)

        self.workspace = FilterWorkspace(
            X_r=PointSet.fixed(state_dim, point_count),
            X_y=PointSet.fixed(observation_model.observation_dimension(), point_count),
            X_Q=PointSet.fixed(state_noise_dim, point_count),
            X_R=PointSet.fixed(obsrv_noise_dim, point_count),
        )

        # Noise points of the standard normal marginals Q (offset dim(P)) and
        # R (offset dim(P) + dim(Q)) of the augmented Gaussian
        point_set_transform.forward(
            Gaussian(state_noise_dim),
            self.workspace.X_Q,
            self._global_dimension,
            state_dim,
        )
        point_set_transform.forward(
            Gaussian(obsrv_noise_dim),
            self.workspace.X_R,
            self._global_dimension,
            state_dim + state_noise_dim,
        )

    @property
    def process_model(self) -> ProcessModel:
        return self._process_model

    @property
    def observation_model(self) -> ObservationModel:
        return self._observation_model

    @property
    def point_set_transform(self) -> PointSetTransform:
        return self._point_set_transform

    @property
    def global_dimension(self) -> int:
        """Dimension of the augmented Gaussian (state + process + observation noise)."""
        return self._global_dimension

    def _check_belief(self, belief: Gaussian, name: str) -> None:
        state_dim = self._process_model.state_dimension()
        if belief.dimension != state_dim:
            raise DimensionMismatchError(
                f"{name} belief has dimension {belief.dimension}, "
                f"expected state dimension {state_dim}"
            )

    @staticmethod
    def _store(mean: np.ndarray, covariance: np.ndarray, out: Optional[Gaussian]) -> Gaussian:
        if out is None:
            return Gaussian(mean=mean, covariance=covariance)
        out.set_mean(mean)
        out.set_covariance(covariance)
        return out

    def predict(
        self,
        delta_time: float,
        input: Optional[np.ndarray],
        prior: Gaussian,
        predicted: Optional[Gaussian] = None,
    ) -> Gaussian:
        """
        Perform prediction step.

        Args:
            delta_time: Time step.
            input: Control input (input_dimension,), or None for zero input.
            prior: Prior belief N(mu, P).
            predicted: Optional belief to write the result into. May be prior.

        Returns:
            Predicted belief.

        Raises:
            DimensionMismatchError: If prior, input or a propagated point has
                the wrong dimension.
        """
        self._check_belief(prior, "Prior")

        input_dim = self._process_model.input_dimension()
        if input is None:
            input = np.zeros(input_dim)
        else:
            input = np.asarray(input, dtype=float).reshape(-1)
            if input.size != input_dim:
                raise DimensionMismatchError(
                    f"Input has dimension {input.size}, expected {input_dim}"
                )

        ws = self.workspace

        self._point_set_transform.forward(prior, ws.X_r, self._global_dimension, 0)

        # X_r[i] = f(X_r[i], X_Q[i], u)
        for i in range(ws.X_r.count):
            ws.X_r.set_point(
                i,
                self._process_model.predict_state(
                    delta_time, ws.X_r.point(i), ws.X_Q.point(i), input
                ),
            )

        ws.X = ws.X_r.centered_points()
        ws.W = ws.X_r.covariance_weights_vector()

        mean = ws.X_r.mean()
        covariance = symmetrize((ws.X * ws.W) @ ws.X.T)

        return self._store(mean, covariance, predicted)

    def update(
        self,
        observation: np.ndarray,
        predicted: Gaussian,
        posterior: Optional[Gaussian] = None,
    ) -> Gaussian:
        """
        Perform measurement update.

        If P_yy is non-finite or its condition number exceeds
        max_condition_number, singular_policy decides: "raise" raises
        SingularInnovationCovarianceError before any belief is modified,
        "pinv" emits a NumericalWarning and uses the pseudo-inverse.

        Args:
            observation: Observation y (observation_dimension,).
            predicted: Predicted belief.
            posterior: Optional belief to write the result into. May be
                predicted.

        Returns:
            Posterior belief.

        Raises:
            DimensionMismatchError: If observation or predicted has the wrong
                dimension.
            SingularInnovationCovarianceError: If P_yy is numerically singular
                and singular_policy is "raise".
        """
        self._check_belief(predicted, "Predicted")

        obsrv_dim = self._observation_model.observation_dimension()
        y = np.asarray(observation, dtype=float).reshape(-1)
        if y.size != obsrv_dim:
            raise DimensionMismatchError(
                f"Observation has dimension {y.size}, expected {obsrv_dim}"
            )

        ws = self.workspace

        self._point_set_transform.forward(predicted, ws.X_r, self._global_dimension, 0)

        # X_y[i] = h(X_r[i], X_R[i]), sharing the weights of X_r
        for i in range(ws.X_r.count):
            ws.X_y.set_point(
                i,
                self._observation_model.predict_observation(
                    ws.X_r.point(i), ws.X_R.point(i), 0.0
                ),
                ws.X_r.weight(i),
            )

        ws.W = ws.X_r.covariance_weights_vector()
        ws.X = ws.X_r.centered_points()
        ws.Y = ws.X_y.centered_points()

        ws.prediction = ws.X_y.mean()
        ws.innovation = y - ws.prediction

        XW = ws.X * ws.W
        ws.cov_xx = XW @ ws.X.T
        ws.cov_yy = (ws.Y * ws.W) @ ws.Y.T
        ws.cov_xy = XW @ ws.Y.T

        outliers = np.abs(ws.innovation) > self.threshold
        ws.cov_yy[outliers, outliers] += self.inv_sigma

        ws.gain = self._kalman_gain(ws.cov_xy, ws.cov_yy)

        mean = ws.X_r.mean() + ws.gain @ ws.innovation
        covariance = symmetrize(ws.cov_xx - ws.gain @ ws.cov_yy @ ws.gain.T)

        return self._store(mean, covariance, posterior)

    def _kalman_gain(self, cov_xy: np.ndarray, cov_yy: np.ndarray) -> np.ndarray:
        """K = P_xy P_yy^{-1}, guarded against a singular P_yy."""
        if cov_yy.size == 0:
            return np.zeros_like(cov_xy)

        if np.all(np.isfinite(cov_yy)):
            condition_number = np.linalg.cond(cov_yy)
        else:
            condition_number = np.inf

        if not np.isfinite(condition_number) or condition_number > self.max_condition_number:
            if self.singular_policy == "raise":
                raise SingularInnovationCovarianceError(condition_number)

            warnings.warn(
                f"Innovation covariance is numerically singular (condition number "
                f"{condition_number:.3e}); using the pseudo-inverse.",
                NumericalWarning,
                stacklevel=3,
            )
            return cov_xy @ np.linalg.pinv(cov_yy)

        # K P_yy = P_xy  <=>  P_yy^T K^T = P_xy^T
        return np.linalg.solve(cov_yy.T, cov_xy.T).T
