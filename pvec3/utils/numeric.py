from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import numpy as np

from pvec3.utils.types import DTypeLike

logger = logging.getLogger(__name__)

############################
# ELEMENT TYPES
############################

# signed int, unsigned int, floating
SUPPORTED_KINDS = "iuf"

DEFAULT_DTYPE = np.dtype(np.float64)


class ConversionRangeError(OverflowError, ValueError):
    """
    A numeric value cannot be represented in the requested element type.

    Raised only by conversions into integers: the source is out of the
    target's range, NaN / infinite, or (for `exact_integer`) fractional.
    """


def resolve_dtype(dtype: DTypeLike = None) -> np.dtype:
    """
    Normalize a dtype-like into a supported numpy element type.

    Parameters
    ----------
    dtype : dtype-like, optional
        Anything accepted by ``np.dtype`` ("float32", np.uint16, float, ...).
        If None, float64 is used.

    Returns
    -------
    np.dtype
        A signed integer, unsigned integer or floating dtype.

    Raises
    ------
    TypeError
        If the dtype is unknown or not a real numeric type (bool, complex,
        strings, objects are rejected).
    """
    if dtype is None:
        return DEFAULT_DTYPE
    try:
        dt = np.dtype(dtype)
    except TypeError as e:
        raise TypeError(f"Unrecognized element type {dtype!r}.") from e
    if dt.kind not in SUPPORTED_KINDS:
        raise TypeError(
            f"Unsupported element type {dt.name!r}: expected a signed/unsigned integer or floating dtype."
        )
    return dt

############################
# CHECKED CASTS
############################

def _fail(value: Any, target: str, reason: str) -> None:
    logger.debug("checked cast of %r to %s failed: %s", value, target, reason)
    raise ConversionRangeError(f"Cannot represent {value!r} as {target}: {reason}.")


def _int_to_float(v: int) -> float:
    try:
        return float(v)
    except OverflowError:
        return math.inf if v > 0 else -math.inf


def _to_integer_type(v: int, dt: np.dtype, source: Any) -> np.integer:
    info = np.iinfo(dt)
    if not (info.min <= v <= info.max):
        _fail(source, dt.name, f"out of range [{info.min}, {info.max}]")
    return dt.type(v)


def checked_cast(value: Any, dtype: DTypeLike = None) -> np.generic:
    """
    Convert a real number to a scalar of `dtype`, failing loudly instead of wrapping.

    Rules
    -----
    - integer target: integer sources must lie within ``np.iinfo(dtype)``;
      floating sources are truncated toward zero and then range-checked;
      NaN and infinities cannot be represented and fail.
    - floating target: never fails. NaN and infinities are preserved, finite
      values round to nearest and overflow to +/-inf.

    Parameters
    ----------
    value : real number
        Python int/float/bool, any numpy integer/floating/bool scalar, or any
        ``numbers.Real`` (e.g. ``fractions.Fraction``).
    dtype : dtype-like, optional
        Target element type (default: float64).

    Returns
    -------
    numpy scalar
        ``value`` as an instance of ``dtype.type``.

    Raises
    ------
    ConversionRangeError
        If an integer target cannot hold the value.
    TypeError
        If `value` is not a real number or `dtype` is unsupported.
    """
    dt = resolve_dtype(dtype)

    if isinstance(value, (bool, np.bool_)):
        value = int(value)

    if isinstance(value, numbers.Integral):
        v = int(value)
        if dt.kind == "f":
            with np.errstate(all="ignore"):
                return dt.type(_int_to_float(v))
        return _to_integer_type(v, dt, value)

    if isinstance(value, numbers.Real):
        if dt.kind == "f":
            if not isinstance(value, (float, np.floating)):
                try:
                    value = float(value)
                except OverflowError:
                    value = math.inf if value > 0 else -math.inf
            with np.errstate(all="ignore"):
                return dt.type(value)

        source = value
        if isinstance(value, np.floating):
            value = float(value)
        if isinstance(value, float) and not math.isfinite(value):
            _fail(source, dt.name, "not a finite number")
        return _to_integer_type(math.trunc(value), dt, source)

    raise TypeError(f"Expected a real number, got {type(value).__name__}: {value!r}")


def exact_integer(value: Any) -> int:
    """
    Return `value` as a Python int, refusing anything that is not a whole number.

    Unlike `checked_cast`, fractional parts are never truncated: 2.0 and
    Fraction(4, 2) are accepted, 2.5, NaN and infinities raise
    `ConversionRangeError`.
    """
    if isinstance(value, (bool, np.bool_)):
        return int(value)
    if isinstance(value, numbers.Integral):
        return int(value)
    if not isinstance(value, numbers.Real):
        raise TypeError(f"Expected a real number, got {type(value).__name__}: {value!r}")
    source = value
    if isinstance(value, np.floating):
        value = float(value)
    if isinstance(value, float) and not math.isfinite(value):
        _fail(source, "an integer", "not a finite number")
    whole = math.trunc(value)
    if whole != value:
        _fail(source, "an integer", "not a whole number")
    return whole

############################
# NUMERIC CAPABILITY
############################

@dataclass(frozen=True, slots=True)
class NumericType:
    """
    Arithmetic capability of one element type.

    Bundles what the vector operations need from their element type: the
    zero/one constants, square root and checked conversion from other numbers.

    Attributes
    ----------
    dtype : np.dtype
        A supported element type (see `resolve_dtype`).
    """
    dtype: np.dtype

    @classmethod
    def of(cls, dtype: DTypeLike = None) -> "NumericType":
        """Return the (cached) capability of `dtype`."""
        return _numeric_type(resolve_dtype(dtype))

    @property
    def is_float(self) -> bool:
        return self.dtype.kind == "f"

    def zero(self) -> np.generic:
        return self.dtype.type(0)

    def one(self) -> np.generic:
        return self.dtype.type(1)

    def cast(self, value: Any) -> np.generic:
        return checked_cast(value, self.dtype)

    def sqrt(self, value: np.generic) -> np.generic:
        # sqrt of a negative gives NaN, as with any other invalid float op
        with np.errstate(all="ignore"):
            return self.dtype.type(np.sqrt(value))

    def require_float(self, operation: str) -> None:
        """
        Raises
        ------
        TypeError
            If the element type is not floating.
        """
        if not self.is_float:
            raise TypeError(f"{operation} requires a floating element type, got {self.dtype.name}.")


@lru_cache(maxsize=None)
def _numeric_type(dt: np.dtype) -> NumericType:
    return NumericType(dt)
