from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Optional
import numpy as np

from common.errors import IndexOutOfRangeError
from common.utils import to_numpy_square


class ParamType(Enum):
    """
    How a sensor-model parameter value was obtained.

    NONE:       not yet initialized.
    FICTITIOUS: calculated by resection or other means.
    REAL:       measured or read from support data.
    EXACT:      specified and assumed to have no uncertainty.
    """
    NONE = 0
    FICTITIOUS = 1
    REAL = 2
    EXACT = 3


def _covar_index(dim: int, i: int, j: Optional[int], function: str) -> tuple[int, int]:
    """Map flat (row-major) or (row, col) addressing onto a dim x dim matrix."""
    if j is None:
        if not 0 <= i < dim * dim:
            raise IndexOutOfRangeError("Covariance index is out of range.", function)
        return divmod(i, dim)
    if not (0 <= i < dim and 0 <= j < dim):
        raise IndexOutOfRangeError("Covariance index is out of range.", function)
    return i, j


@dataclass(slots=True)
class ImageCoord:
    """
    2-D point in image space (line, sample), in pixels.

    Some sensor-model calls use it as a size (location vector) instead.
    """
    line: float = 0.0
    samp: float = 0.0

    def __post_init__(self) -> None:
        self.line = float(self.line)
        self.samp = float(self.samp)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class ImageCoordCovar(ImageCoord):
    """
    Image coordinate with a 2x2 (line/samp) covariance, pixels^2.

    `covar` may be given as a 2x2 matrix or 4 row-major values.
    """
    covar: np.ndarray = field(default_factory=lambda: np.zeros((2, 2)), repr=False, compare=False)

    def __post_init__(self) -> None:
        ImageCoord.__post_init__(self)
        self.covar = to_numpy_square(self.covar, 2)

    def covar_at(self, i: int, j: Optional[int] = None) -> float:
        r, c = _covar_index(2, i, j, "ImageCoordCovar.covar_at")
        return float(self.covar[r, c])

    def set_covar(self, i: int, j: Optional[int], value: float) -> None:
        r, c = _covar_index(2, i, j, "ImageCoordCovar.set_covar")
        self.covar[r, c] = float(value)

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "samp": self.samp, "covar": self.covar.tolist()}


@dataclass(slots=True)
class ImageVector:
    """2-D vector in image space; also used for image sizes."""
    line: float = 0.0
    samp: float = 0.0

    def __post_init__(self) -> None:
        self.line = float(self.line)
        self.samp = float(self.samp)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class EcefCoord:
    """
    3-D location in Earth Centered Earth Fixed space.

    Units are meters for a location, meters/second when the same structure is
    used as a velocity.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self) -> None:
        self.x = float(self.x)
        self.y = float(self.y)
        self.z = float(self.z)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class EcefCoordCovar(EcefCoord):
    """
    ECEF coordinate with a 3x3 covariance (m^2).

    `covar` may be given as a 3x3 matrix or 9 row-major values.
    """
    covar: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)), repr=False, compare=False)

    def __post_init__(self) -> None:
        EcefCoord.__post_init__(self)
        self.covar = to_numpy_square(self.covar, 3)

    def covar_at(self, i: int, j: Optional[int] = None) -> float:
        r, c = _covar_index(3, i, j, "EcefCoordCovar.covar_at")
        return float(self.covar[r, c])

    def set_covar(self, i: int, j: Optional[int], value: float) -> None:
        r, c = _covar_index(3, i, j, "EcefCoordCovar.set_covar")
        self.covar[r, c] = float(value)

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "z": self.z, "covar": self.covar.tolist()}


@dataclass(slots=True)
class EcefVector:
    """3-D ECEF vector (location offset or velocity)."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self) -> None:
        self.x = float(self.x)
        self.y = float(self.y)
        self.z = float(self.z)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
