"""
Linear-decay correlation model for adjustable sensor-model parameters.

Sensor-model parameters are split into disjoint correlation groups. Within a
group, the correlation between two parameters observed `dt` seconds apart is a
piecewise-linear function of |dt|: each group holds a list of breakpoint times
and the correlation at each breakpoint, with linear interpolation in between and
the last value held flat past the final breakpoint. Parameters in different
groups (or not assigned to any group) are uncorrelated.

The model is configured once (group assignment, per-group curves) and then
queried read-only; it performs no locking of its own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import numpy as np

from common.errors import InvalidInputError
from common.logging_setup import get_logger
from common.utils import as_float_vector, check_index, clamp


log = get_logger("sensor_correlation")

_PARAM_RANGE_MSG = "Sensor model parameter index is out of range."
_GROUP_RANGE_MSG = "Correlation parameter group index is out of range."


def _empty() -> np.ndarray:
    a = np.zeros(0, dtype=float)
    a.flags.writeable = False
    return a


@dataclass(frozen=True, slots=True, eq=False)
class CorrelationCurve:
    """
    Decay curve of one correlation group.

    Attributes:
        correlations: correlation at each breakpoint, in [0..1], non-increasing.
        times: breakpoint times (elapsed seconds), non-decreasing; times[0] is usually 0.

    Both arrays are read-only float64. Construction only coerces the data;
    bounds and ordering are enforced when the curve is handed to
    LinearDecayCorrelationModel.
    """
    correlations: np.ndarray = field(default_factory=_empty)
    times: np.ndarray = field(default_factory=_empty)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "correlations", as_float_vector(self.correlations, "correlations", "CorrelationCurve")
        )
        object.__setattr__(self, "times", as_float_vector(self.times, "times", "CorrelationCurve"))

    def __len__(self) -> int:
        return int(self.correlations.shape[0])

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def as_lists(self) -> Tuple[List[float], List[float]]:
        return self.correlations.tolist(), self.times.tolist()


def validate_curve(curve: CorrelationCurve, function: str) -> None:
    """
    Raise InvalidInputError unless `curve` is a legal decay curve.

    Curves with fewer than two breakpoints are accepted as-is; longer curves are
    scanned in breakpoint order and the first violation wins.
    """
    corrs = curve.correlations
    times = curve.times
    size = corrs.shape[0]
    if size != times.shape[0]:
        raise InvalidInputError("Must have equal number of correlations and times.", function)
    if size <= 1:
        return

    for i in range(size):
        corr = corrs[i]
        # NaN fails this test too
        if not 0.0 <= corr <= 1.0:
            raise InvalidInputError("Correlation must be in range [0..1].", function)
        if i > 0:
            if corr > corrs[i - 1]:
                raise InvalidInputError("Correlation must be monotonically decreasing.", function)
            if not times[i] >= times[i - 1]:
                raise InvalidInputError("Time must be monotonically increasing.", function)


def evaluate_curve(curve: CorrelationCurve, delta_time: float) -> float:
    """
    Correlation at |delta_time| along a non-empty curve, clamped to [0..1].
    """
    corrs = curve.correlations
    times = curve.times
    adt = abs(float(delta_time))

    prev_corr = float(corrs[0])
    prev_time = float(times[0])
    correlation = prev_corr

    for s in range(1, corrs.shape[0]):
        corr = float(corrs[s])
        time = float(times[s])
        if adt <= time:
            if time != prev_time:
                correlation = prev_corr + (adt - prev_time) / (time - prev_time) * (corr - prev_corr)
            break
        prev_corr = corr
        prev_time = time
        correlation = prev_corr

    return clamp(correlation, 0.0, 1.0)


class LinearDecayCorrelationModel:
    """
    Correlation between sensor-model parameters as a piecewise-linear decay in time.

    Args:
        num_sensor_model_parameters: number of adjustable sensor-model parameters.
        num_groups: number of correlation parameter groups.

    Both sizes are fixed for the lifetime of the instance. Every parameter starts
    unassigned (None) and every group starts with an empty curve.
    """

    FORMAT = "LinearDecayCorrelation"

    def __init__(self, num_sensor_model_parameters: int, num_groups: int):
        fn = "LinearDecayCorrelationModel.__init__"
        for name, value in (("num_sensor_model_parameters", num_sensor_model_parameters), ("num_groups", num_groups)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 0:
                raise InvalidInputError(f"{name} must be a non-negative integer.", fn)

        self._group_mapping: List[Optional[int]] = [None] * int(num_sensor_model_parameters)
        self._curves: List[CorrelationCurve] = [CorrelationCurve() for _ in range(int(num_groups))]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(num_sensor_model_parameters={len(self._group_mapping)}, "
            f"num_groups={len(self._curves)})"
        )

    @property
    def format(self) -> str:
        return self.FORMAT

    # -------------------------
    # Sizes
    # -------------------------
    def get_num_sensor_model_parameters(self) -> int:
        return len(self._group_mapping)

    def get_num_correlation_parameter_groups(self) -> int:
        return len(self._curves)

    # -------------------------
    # Group mapping
    # -------------------------
    def get_correlation_parameter_group(self, param_index: int) -> Optional[int]:
        """Group of a sensor-model parameter, or None if it has not been assigned."""
        idx = self._check_param(param_index, "get_correlation_parameter_group")
        return self._group_mapping[idx]

    def set_correlation_parameter_group(self, param_index: int, group_index: int) -> None:
        """Assign a sensor-model parameter to a group. Reassignment overwrites."""
        idx = self._check_param(param_index, "set_correlation_parameter_group")
        grp = self._check_group(group_index, "set_correlation_parameter_group")
        self._group_mapping[idx] = grp
        log.debug("parameter group assigned", extra={"extra": {"param": idx, "group": grp}})

    # -------------------------
    # Curves
    # -------------------------
    def set_correlation_group_parameters(
        self,
        group_index: int,
        correlations: Iterable[float],
        times: Iterable[float],
    ) -> None:
        """
        Replace the decay curve of a group.

        Args:
            group_index: correlation group to update.
            correlations: correlation at each breakpoint, [0..1], non-increasing.
            times: breakpoint times, non-decreasing, same length as `correlations`.

        Raises:
            IndexOutOfRangeError: bad group index.
            InvalidInputError: length mismatch, value outside [0..1], or ordering violation.
        """
        fn = "LinearDecayCorrelationModel.set_correlation_group_parameters"
        grp = self._check_group(group_index, "set_correlation_group_parameters")
        curve = CorrelationCurve(
            correlations=as_float_vector(correlations, "correlations", fn),
            times=as_float_vector(times, "times", fn),
        )
        self._commit_curve(grp, curve, fn)

    def set_correlation_group_curve(self, group_index: int, curve: CorrelationCurve) -> None:
        """Same as set_correlation_group_parameters, taking a prebuilt curve."""
        fn = "LinearDecayCorrelationModel.set_correlation_group_curve"
        grp = self._check_group(group_index, "set_correlation_group_curve")
        if not isinstance(curve, CorrelationCurve):
            raise InvalidInputError("curve must be a CorrelationCurve.", fn)
        self._commit_curve(grp, curve, fn)

    def get_correlation_group_parameters(self, group_index: int) -> CorrelationCurve:
        """Current curve of a group (immutable; empty if never set)."""
        grp = self._check_group(group_index, "get_correlation_group_parameters")
        return self._curves[grp]

    # -------------------------
    # Coefficients
    # -------------------------
    def get_correlation_coefficient(self, group_index: int, delta_time: float) -> float:
        """
        Correlation coefficient of a group for two observations `delta_time` apart.

        The sign of `delta_time` is ignored. Between breakpoints the value is
        interpolated linearly; past the last breakpoint it is held at the last
        correlation. The result is always within [0..1].
        """
        grp = self._check_group(group_index, "get_correlation_coefficient")
        curve = self._curves[grp]
        if len(curve) == 0:
            raise InvalidInputError(
                f"No correlation values have been set for group {grp}.",
                "LinearDecayCorrelationModel.get_correlation_coefficient",
            )
        return evaluate_curve(curve, delta_time)

    def get_correlation_coefficients(self, group_index: int, delta_times: Iterable[float]) -> np.ndarray:
        """Vector form of get_correlation_coefficient; returns an array shaped like `delta_times`."""
        dts = np.asarray(delta_times, dtype=float)
        out = np.empty(dts.shape, dtype=float)
        for k, dt in np.ndenumerate(dts):
            out[k] = self.get_correlation_coefficient(group_index, float(dt))
        return out

    def get_parameter_correlation(self, param_a: int, param_b: int, delta_time: float) -> float:
        """
        Correlation between two sensor-model parameters observed `delta_time` apart.

        0.0 when either parameter is unassigned or the two sit in different groups.
        """
        a = self._check_param(param_a, "get_parameter_correlation")
        b = self._check_param(param_b, "get_parameter_correlation")
        ga = self._group_mapping[a]
        gb = self._group_mapping[b]
        if ga is None or gb is None or ga != gb:
            return 0.0
        return self.get_correlation_coefficient(ga, delta_time)

    # -------------------------
    # Internals
    # -------------------------
    def _commit_curve(self, grp: int, curve: CorrelationCurve, function: str) -> None:
        validate_curve(curve, function)
        self._curves[grp] = curve
        log.debug(
            "correlation curve replaced",
            extra={"extra": {"group": grp, "breakpoints": len(curve)}},
        )

    def _check_param(self, param_index: int, op: str) -> int:
        return check_index(
            param_index, len(self._group_mapping), _PARAM_RANGE_MSG, f"LinearDecayCorrelationModel.{op}"
        )

    def _check_group(self, group_index: int, op: str) -> int:
        return check_index(group_index, len(self._curves), _GROUP_RANGE_MSG, f"LinearDecayCorrelationModel.{op}")
