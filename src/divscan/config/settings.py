"""Scan settings: the three tunables of the divergence scanner.

Settings come from one of three places, in the order callers usually reach
for them:

  - a named preset (``PRESETS``) matching how the chart and report views
    call the scanner,
  - environment variables (``DIVSCAN_ORDER``, ``DIVSCAN_MIN_STRENGTH``,
    ``DIVSCAN_WINDOW_SIZE``),
  - a nested config dict, ``{"divergence": {"order": ..., ...}}``.

Missing values fall back to the scanner defaults. The strength breakpoints
(weak / moderate / strong) are fixed and deliberately not configurable here.
"""

from __future__ import annotations

import math
import os
from dataclasses import asdict, dataclass
from typing import Mapping

from divscan.signals.divergence.errors import ScanParameterError, check_positive_int
from divscan.signals.divergence.scanner import (
    DEFAULT_MIN_STRENGTH,
    DEFAULT_ORDER,
    DEFAULT_WINDOW_SIZE,
)

ENV_PREFIX = "DIVSCAN_"


@dataclass(frozen=True)
class ScanSettings:
    """Immutable parameters for one divergence scan.

    Attributes
    ----------
    order : int
        Half-width of the extremum neighborhood.
    min_strength : float
        Minimum combined percentage move for a pattern to be emitted.
    window_size : int
        Exclusive matching radius between price and indicator extrema.
    """

    order: int = DEFAULT_ORDER
    min_strength: float = DEFAULT_MIN_STRENGTH
    window_size: int = DEFAULT_WINDOW_SIZE

    def validate(self) -> "ScanSettings":
        """Raise ScanParameterError if any field is out of range; return self."""
        check_positive_int("order", self.order)
        check_positive_int("window_size", self.window_size)
        if not math.isfinite(self.min_strength):
            raise ScanParameterError(
                "min_strength", self.min_strength, "a finite number"
            )
        return self

    def as_kwargs(self) -> dict:
        """Keyword arguments for ``detect_divergences``."""
        return asdict(self)

    def replace(self, **overrides) -> "ScanSettings":
        """Return a copy with the non-None ``overrides`` applied."""
        values = self.as_kwargs()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ScanSettings(**values)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ScanSettings":
        """Build settings from ``DIVSCAN_*`` environment variables.

        Unparseable values raise ScanParameterError naming the variable.
        """
        env = os.environ if environ is None else environ
        return cls(
            order=_env_value(env, "ORDER", int, DEFAULT_ORDER),
            min_strength=_env_value(env, "MIN_STRENGTH", float, DEFAULT_MIN_STRENGTH),
            window_size=_env_value(env, "WINDOW_SIZE", int, DEFAULT_WINDOW_SIZE),
        )

    @classmethod
    def from_dict(cls, config: Mapping) -> "ScanSettings":
        """Build settings from the ``divergence`` section of a config dict."""
        section = config.get("divergence", {})
        return cls(
            order=section.get("order", DEFAULT_ORDER),
            min_strength=section.get("min_strength", DEFAULT_MIN_STRENGTH),
            window_size=section.get("window_size", DEFAULT_WINDOW_SIZE),
        )


PRESETS: dict[str, ScanSettings] = {
    "default": ScanSettings(),
    # Pattern analysis views scan close vs. RSI with wider swings.
    "chart": ScanSettings(order=5, min_strength=0.02, window_size=5),
}


def get_preset(name: str) -> ScanSettings:
    """Return the named preset.

    Raises
    ------
    KeyError
        If ``name`` is not a known preset; the message lists the valid names.
    """
    try:
        return PRESETS[name]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise KeyError(f"Unknown preset {name!r} (known: {known})") from None


def _env_value(env: Mapping[str, str], key: str, cast: type, default):
    raw = env.get(ENV_PREFIX + key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ScanParameterError(
            ENV_PREFIX + key, raw, f"parseable as {cast.__name__}"
        ) from None
