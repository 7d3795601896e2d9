from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class WaitOptions:
    timeout_ms: int = 30_000
    stability_ms: int = 300
    polling_ms: int = 10
    throw_on_timeout: bool = True
    wrap_predicate_execution_inside_try_catch: bool = False
    verbose: bool = False

    def merge(self, **overrides: Any) -> "WaitOptions":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ClientRect:
    top: float
    left: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ClientRect":
        return cls(
            top=float(payload.get("top", 0) or 0),
            left=float(payload.get("left", 0) or 0),
            width=float(payload.get("width", 0) or 0),
            height=float(payload.get("height", 0) or 0),
        )


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class ComputedStyle:
    opacity: str = "1"
    visibility: str = "visible"
    position: str = "static"

    @property
    def is_transparent(self) -> bool:
        try:
            return float(self.opacity) == 0.0
        except ValueError:
            return False


@dataclass(frozen=True)
class SelectOptionInfo:
    value: str
    label: str
    selected: bool


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


@dataclass(frozen=True)
class ProbeConfig:
    """Configuration for PageProbe and the REPL launcher."""
    default_wait: WaitOptions = field(default_factory=WaitOptions)
    headless: bool = True
    viewport_width: int = 1440
    viewport_height: int = 900

    @classmethod
    def from_env(cls) -> "ProbeConfig":
        base = WaitOptions()
        return cls(
            default_wait=WaitOptions(
                timeout_ms=_env_int("PAGEPROBE_TIMEOUT_MS", base.timeout_ms),
                stability_ms=_env_int("PAGEPROBE_STABILITY_MS", base.stability_ms),
                polling_ms=_env_int("PAGEPROBE_POLLING_MS", base.polling_ms),
                verbose=_env_bool("PAGEPROBE_VERBOSE", base.verbose),
            ),
            headless=_env_bool("PAGEPROBE_HEADLESS", True),
        )
