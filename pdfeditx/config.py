"""Engine settings for pdfeditx.

``PDFEDITX_*`` environment variables override the most commonly tuned
values; operations also accept an explicit ``settings`` argument.
"""

from __future__ import annotations

import dataclasses
import os
from typing import Mapping, Optional, Tuple

from .exceptions import InvalidOptionError

A4_PORTRAIT: Tuple[float, float] = (595.28, 841.89)

ENV_EXPORT_SCALE = "PDFEDITX_EXPORT_SCALE"
ENV_EXPORT_JPEG_QUALITY = "PDFEDITX_EXPORT_JPEG_QUALITY"
ENV_LOSSLESS_THRESHOLD = "PDFEDITX_LOSSLESS_THRESHOLD"


@dataclasses.dataclass(frozen=True)
class EngineSettings:
    """Tunables shared by every operation."""

    export_scale: float = 2.0
    export_jpeg_quality: int = 90
    lossless_quality_threshold: float = 0.9
    fixed_page_size: Tuple[float, float] = A4_PORTRAIT
    min_jpeg_quality: int = 20
    max_jpeg_quality: int = 95

    def __post_init__(self) -> None:
        if self.export_scale <= 0:
            raise InvalidOptionError(f"Export scale must be positive, got {self.export_scale}")
        if not 1 <= self.export_jpeg_quality <= 100:
            raise InvalidOptionError(
                f"JPEG quality must be between 1 and 100, got {self.export_jpeg_quality}"
            )
        if not 0.0 <= self.lossless_quality_threshold <= 1.0:
            raise InvalidOptionError(
                "Lossless threshold must be between 0 and 1, got "
                f"{self.lossless_quality_threshold}"
            )
        if self.min_jpeg_quality > self.max_jpeg_quality:
            raise InvalidOptionError("min_jpeg_quality cannot exceed max_jpeg_quality")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        try:
            if env.get(ENV_EXPORT_SCALE):
                overrides["export_scale"] = float(env[ENV_EXPORT_SCALE])
            if env.get(ENV_EXPORT_JPEG_QUALITY):
                overrides["export_jpeg_quality"] = int(env[ENV_EXPORT_JPEG_QUALITY])
            if env.get(ENV_LOSSLESS_THRESHOLD):
                overrides["lossless_quality_threshold"] = float(env[ENV_LOSSLESS_THRESHOLD])
        except ValueError as exc:
            raise InvalidOptionError(f"Invalid pdfeditx environment setting: {exc}") from exc
        return cls(**overrides)  # type: ignore[arg-type]


_DEFAULT_SETTINGS: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Return the process-wide settings, reading the environment once."""

    global _DEFAULT_SETTINGS
    if _DEFAULT_SETTINGS is None:
        _DEFAULT_SETTINGS = EngineSettings.from_env()
    return _DEFAULT_SETTINGS


__all__ = ["A4_PORTRAIT", "EngineSettings", "get_settings"]
