from .numeric import (
    ConversionRangeError,
    NumericType,
    checked_cast,
    exact_integer,
    resolve_dtype,
)
