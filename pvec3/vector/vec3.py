from __future__ import annotations

import numbers
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

import numpy as np

from pvec3.config import DEFAULT_CONFIG, VecConfig
from pvec3.utils.numeric import NumericType, SUPPORTED_KINDS, exact_integer
from pvec3.utils.types import Array3, ArrayLike, DTypeLike, Scalar, Triple


@dataclass(frozen=True, slots=True, repr=False)
class Vec3:
    """
    Immutable three-component vector over a numpy element type.

    Parameters
    ----------
    x, y, z : real numbers
        Components. Each one is converted to `dtype` with a checked cast
        (see `pvec3.utils.numeric.checked_cast`).
    dtype : dtype-like, optional
        Element type (signed/unsigned integer or floating). Defaults to
        float64.

    Attributes
    ----------
    x, y, z : numpy scalar
        Components, all of type ``dtype.type``.
    dtype : np.dtype
        Resolved element type.

    Raises
    ------
    ConversionRangeError
        If a component cannot be represented in `dtype`.

    Notes
    -----
    Construction works for any supported element type; `length`, `dot`,
    `cross` and `normalize` require a floating one. For floating types these
    operations never raise: NaN and infinities flow through like any other
    value.
    """
    x: Scalar
    y: Scalar
    z: Scalar
    dtype: Optional[DTypeLike] = None

    # numpy scalars on the left defer to __rmul__
    __array_ufunc__ = None

    def __post_init__(self):
        num = NumericType.of(self.dtype)
        object.__setattr__(self, "dtype", num.dtype)
        # cast all three before storing anything: no partially converted vector
        x, y, z = num.cast(self.x), num.cast(self.y), num.cast(self.z)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)
        object.__setattr__(self, "z", z)

    ############################
    # CONSTRUCTORS
    ############################

    @classmethod
    def new(cls, dtype: DTypeLike = None) -> "Vec3":
        """Zero vector of the given element type."""
        zero = NumericType.of(dtype).zero()
        return cls(zero, zero, zero, dtype=dtype)

    @classmethod
    def from_scalar(cls, value: Scalar, dtype: DTypeLike = None) -> "Vec3":
        """
        Broadcast one scalar to all three components.

        The scalar is converted once, so all components are identical.
        """
        v = NumericType.of(dtype).cast(value)
        return cls(v, v, v, dtype=dtype)

    @classmethod
    def splat(cls, value: Scalar, dtype: DTypeLike = None) -> "Vec3":
        """Alias of `from_scalar`."""
        return cls.from_scalar(value, dtype=dtype)

    @classmethod
    def from_tuple(cls, values: Sequence[Scalar], dtype: DTypeLike = None) -> "Vec3":
        """
        Build from an (x, y, z) sequence.

        Raises
        ------
        ValueError
            If `values` does not hold exactly three components.
        """
        values = tuple(values)
        if len(values) != 3:
            raise ValueError(f"Expected 3 components (x, y, z), got {len(values)}.")
        x, y, z = values
        return cls(x, y, z, dtype=dtype)

    @classmethod
    def from_array(cls, array: ArrayLike, dtype: DTypeLike = None) -> "Vec3":
        """
        Build from a shape (3,) array-like.

        If `dtype` is omitted and the array has a supported numeric dtype, the
        array's dtype is kept.
        """
        arr = np.asarray(array)
        if arr.shape != (3,):
            raise ValueError(f"Expected a 3-vector with shape (3,), got {arr.shape}")
        if dtype is None and arr.dtype.kind in SUPPORTED_KINDS:
            dtype = arr.dtype
        return cls(arr[0], arr[1], arr[2], dtype=dtype)

    @classmethod
    def from_value(cls, value: Any, dtype: DTypeLike = None) -> "Vec3":
        """
        Generic conversion: a scalar broadcasts, a (3,) array or any other
        iterable of three numbers maps component-wise, a Vec3 is recast.
        """
        if isinstance(value, Vec3):
            return value.astype(dtype if dtype is not None else value.dtype)
        if isinstance(value, np.ndarray):
            return cls.from_array(value, dtype=dtype)
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            return cls.from_tuple(value, dtype=dtype)
        return cls.from_scalar(value, dtype=dtype)

    ############################
    # ACCESS
    ############################

    @property
    def numeric(self) -> NumericType:
        return NumericType.of(self.dtype)

    def __iter__(self) -> Iterator[np.generic]:
        yield self.x
        yield self.y
        yield self.z

    def as_tuple(self) -> Triple:
        return (self.x, self.y, self.z)

    def to_array(self) -> Array3:
        """Return a new (3,) ndarray with the vector's dtype."""
        return np.array([self.x, self.y, self.z], dtype=self.dtype)

    def astype(self, dtype: DTypeLike) -> "Vec3":
        """Checked recast of every component to `dtype`."""
        return Vec3(self.x, self.y, self.z, dtype=dtype)

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.to_array())))

    def __repr__(self) -> str:
        return f"Vec3({self.x!r}, {self.y!r}, {self.z!r}, dtype={self.dtype.name})"

    ############################
    # GEOMETRY
    ############################

    def _check_other(self, other: "Vec3", operation: str) -> None:
        if not isinstance(other, Vec3):
            raise TypeError(f"{operation} expects a Vec3, got {type(other).__name__}.")
        if other.dtype != self.dtype:
            raise TypeError(
                f"{operation} of vectors with different element types: {self.dtype.name} vs {other.dtype.name}."
            )

    def dot(self, other: "Vec3") -> np.floating:
        """x1*x2 + y1*y2 + z1*z2, evaluated left to right in the element type."""
        self.numeric.require_float("dot")
        self._check_other(other, "dot")
        return self._dot(other)

    def _dot(self, other: "Vec3") -> np.floating:
        with np.errstate(all="ignore"):
            return self.x * other.x + self.y * other.y + self.z * other.z

    def length_squared(self) -> np.floating:
        self.numeric.require_float("length_squared")
        return self._dot(self)

    def length(self) -> np.floating:
        """Euclidean length, sqrt(x*x + y*y + z*z)."""
        num = self.numeric
        num.require_float("length")
        return num.sqrt(self._dot(self))

    def cross(self, other: "Vec3") -> "Vec3":
        """
        Right-handed cross product self x other.

        Swapping the operands negates every component exactly.
        """
        self.numeric.require_float("cross")
        self._check_other(other, "cross")
        a, b = self, other
        with np.errstate(all="ignore"):
            return Vec3(
                a.y * b.z - a.z * b.y,
                a.z * b.x - a.x * b.z,
                a.x * b.y - a.y * b.x,
                dtype=self.dtype,
            )

    def normalize(self) -> "Vec3":
        """
        Unit vector with the same direction.

        Vectors whose squared length is not strictly positive (the zero vector,
        or anything containing NaN) are returned unchanged.
        """
        num = self.numeric
        num.require_float("normalize")
        sq = self._dot(self)
        with np.errstate(all="ignore"):
            if sq > num.zero():
                return self.scale(num.one() / num.sqrt(sq))
        return self

    ############################
    # SCALAR ARITHMETIC
    ############################

    def scale(self, k: Scalar) -> "Vec3":
        """
        Multiply every component by the scalar `k`.

        For floating element types `k` is cast to the element type first.
        For integer element types `k` must be a whole number (2.0 is fine,
        2.5 raises `ConversionRangeError`) and the exact products are
        range-checked like any other conversion.
        """
        num = self.numeric
        if num.is_float:
            k = num.cast(k)
            with np.errstate(all="ignore"):
                return Vec3(self.x * k, self.y * k, self.z * k, dtype=self.dtype)
        k = exact_integer(k)
        return Vec3(int(self.x) * k, int(self.y) * k, int(self.z) * k, dtype=self.dtype)

    def __mul__(self, k: Any) -> "Vec3":
        if isinstance(k, Vec3) or not isinstance(k, (numbers.Real, np.bool_)):
            return NotImplemented
        return self.scale(k)

    __rmul__ = __mul__

    def __neg__(self) -> "Vec3":
        if self.numeric.is_float:
            return Vec3(-self.x, -self.y, -self.z, dtype=self.dtype)
        return Vec3(-int(self.x), -int(self.y), -int(self.z), dtype=self.dtype)

    ############################
    # COMPARISON
    ############################

    def isclose(
        self,
        other: "Vec3",
        *,
        rtol: Optional[float] = None,
        atol: Optional[float] = None,
        config: Optional[VecConfig] = None,
    ) -> bool:
        """
        Component-wise approximate equality (``np.isclose`` semantics).

        Explicit `rtol` / `atol` win over `config`, which defaults to
        `DEFAULT_CONFIG`. NaN components never compare close.
        """
        if not isinstance(other, Vec3):
            raise TypeError(f"isclose expects a Vec3, got {type(other).__name__}.")
        cfg = DEFAULT_CONFIG if config is None else config
        rtol = cfg.rtol if rtol is None else rtol
        atol = cfg.atol if atol is None else atol
        a = self.to_array().astype(float)
        b = other.to_array().astype(float)
        with np.errstate(all="ignore"):
            return bool(np.all(np.isclose(a, b, rtol=rtol, atol=atol)))
