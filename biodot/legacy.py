"""Translation of deprecated dot-plot options to their canonical form."""

from __future__ import annotations

import warnings
from typing import Any, Mapping

LEGACY_OPTIONS: dict[str, str] = {
    "low_color": "'low_color=' is deprecated, use 'colors=' instead",
    "high_color": "'high_color=' is deprecated, use 'colors=' instead",
    "max_ave": "'max_ave=' is deprecated, use 'zlim=' instead",
}

_WARNED: set[str] = set()


def _warn_once(name: str) -> None:
    if name in _WARNED:
        return
    _WARNED.add(name)
    warnings.warn(LEGACY_OPTIONS[name], FutureWarning, stacklevel=3)


def reset_legacy_warnings() -> None:
    """Forget which deprecation warnings were already emitted."""
    _WARNED.clear()


def translate_legacy_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of `options` with deprecated keys mapped to canonical ones.

    - `max_ave` becomes `zlim=(detection_limit, max_ave)` and overrides `zlim`.
    - `low_color`/`high_color` become `colors=(low, high)` when both are given
      and `colors` is unset; otherwise they are dropped.

    Each deprecated key warns once per process.
    """
    out = dict(options)
    low = out.pop("low_color", None)
    high = out.pop("high_color", None)
    max_ave = out.pop("max_ave", None)

    if low is not None:
        _warn_once("low_color")
    if high is not None:
        _warn_once("high_color")
    if low is not None and high is not None and out.get("colors") is None:
        out["colors"] = (str(low), str(high))

    if max_ave is not None:
        _warn_once("max_ave")
        floor = out.get("detection_limit")
        floor = 0.0 if floor is None else float(floor)
        out["zlim"] = (floor, float(max_ave))
    return out
