from __future__ import annotations

from typing import Tuple, Union

import numpy as np
from numpy.typing import NDArray, ArrayLike, DTypeLike

Scalar = Union[int, float, np.integer, np.floating]
Triple = Tuple[Scalar, Scalar, Scalar]

Array3 = NDArray[np.number]  # intended shape (3,)

__all__ = [
    "ArrayLike", "DTypeLike", "NDArray",
    "Scalar", "Triple", "Array3",
]
