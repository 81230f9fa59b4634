from __future__ import annotations

from collections.abc import Iterator
from typing import Iterable
import numpy as np

from common.errors import IndexOutOfRangeError, InvalidInputError


def clamp(v: float, lo: float, hi: float) -> float:
    return float(min(hi, max(lo, v)))


def check_index(index: int, size: int, message: str, function: str) -> int:
    """
    Validate a non-negative index against `size`.

    Negative values are out of range (no Python-style wraparound); bools and
    non-integers are rejected the same way so a bad index can never alias a
    real one.
    """
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        raise IndexOutOfRangeError(message, function)
    if index < 0 or index >= size:
        raise IndexOutOfRangeError(message, function)
    return int(index)


def as_float_vector(values: Iterable[float], name: str, function: str) -> np.ndarray:
    """
    Coerce a 1-D numeric sequence into a read-only float64 array (always a copy).
    Generators and other one-shot iterators are drained first.
    """
    if isinstance(values, Iterator):
        values = list(values)
    try:
        a = np.array(values, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a sequence of numbers", function) from exc
    if a.ndim == 0:
        raise InvalidInputError(f"{name} must be a sequence of numbers", function)
    if a.ndim != 1:
        raise InvalidInputError(f"{name} must be one-dimensional", function)
    a.flags.writeable = False
    return a


def to_numpy_square(x, n: int) -> np.ndarray:
    """
    Ensure input is an n x n float64 numpy array (copy). A flat row-major
    sequence of n*n values is accepted too.
    """
    a = np.array(x, dtype=float)
    if a.shape == (n * n,):
        a = a.reshape(n, n)
    if a.shape != (n, n):
        raise ValueError(f"Expected {n}x{n} or {n * n} values")
    return a
