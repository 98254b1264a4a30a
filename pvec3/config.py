from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from pvec3.io import dump_yaml, load_yaml
from pvec3.utils.numeric import resolve_dtype


@dataclass(frozen=True, slots=True)
class VecConfig:
    """
    Defaults for vector construction and comparison.

    A plain value: pass it where it is needed (e.g. ``Vec3.new(cfg.dtype)``,
    ``v.isclose(w, config=cfg)``). Nothing in the library reads a global copy.

    Parameters
    ----------
    dtype
        Element type to build vectors with. Any numpy name of a
        signed/unsigned integer or floating type.
    rtol
        Relative tolerance for `Vec3.isclose`.
    atol
        Absolute tolerance for `Vec3.isclose`.
        The default (1e-6) is tight enough for float32 unit vectors.
    """
    dtype: str = "float64"
    rtol: float = 1e-9
    atol: float = 1e-6

    def validate(self) -> None:
        resolve_dtype(self.dtype)
        for name in ("rtol", "atol"):
            value = float(getattr(self, name))
            if not (math.isfinite(value) and value >= 0):
                raise ValueError(f"{name} must be finite and >= 0, got {value}.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "dtype": resolve_dtype(self.dtype).name,
            "rtol": float(self.rtol),
            "atol": float(self.atol),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "VecConfig":
        unknown = set(d) - {"dtype", "rtol", "atol"}
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        cfg = cls(
            dtype=str(d.get("dtype", "float64")),
            rtol=float(d.get("rtol", 1e-9)),
            atol=float(d.get("atol", 1e-6)),
        )
        cfg.validate()
        return cfg

    def to_yaml(self, path: str) -> None:
        dump_yaml(self.to_dict(), path)

    @classmethod
    def from_yaml(cls, path: str) -> "VecConfig":
        return cls.from_dict(load_yaml(path))


DEFAULT_CONFIG: VecConfig = VecConfig()
DEFAULT_CONFIG.validate()
