import logging

from .utils.numeric import (
    ConversionRangeError,
    NumericType,
    checked_cast,
    exact_integer,
    resolve_dtype,
)
from .config import VecConfig, DEFAULT_CONFIG
from .vector.vec3 import Vec3

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
