"""Viewer configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from pixview.render import MERGE_THRESHOLD, PLACEHOLDER_TEXT
from pixview.resample import CELL_ASPECT, FILTERS


@dataclass
class ViewerConfig:
    """Tunables of the image view.

    ``aspect`` is how many times taller than wide a terminal cell is.
    ``merge_threshold`` is the largest color distance merged into one run.
    """

    aspect: float = CELL_ASPECT
    merge_threshold: int = MERGE_THRESHOLD
    resample_filter: str = "nearest"
    pan_step_x: float = 0.02
    pan_step_y: float = 0.01
    zoom_step: float = 0.1
    placeholder: str = PLACEHOLDER_TEXT

    def __post_init__(self) -> None:
        if self.aspect <= 0:
            raise ValueError(f"aspect must be positive, got {self.aspect}")
        if self.merge_threshold < 0:
            raise ValueError(
                f"merge_threshold must not be negative, got {self.merge_threshold}"
            )
        if self.resample_filter not in FILTERS:
            raise ValueError(
                f"unknown resample filter {self.resample_filter!r} "
                f"(expected one of: {', '.join(FILTERS)})"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ViewerConfig:
        """Build a config from ``PIXVIEW_*`` environment variables."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        if "PIXVIEW_ASPECT" in env:
            kwargs["aspect"] = _parse(env, "PIXVIEW_ASPECT", float)
        if "PIXVIEW_MERGE_THRESHOLD" in env:
            kwargs["merge_threshold"] = _parse(env, "PIXVIEW_MERGE_THRESHOLD", int)
        if "PIXVIEW_FILTER" in env:
            kwargs["resample_filter"] = env["PIXVIEW_FILTER"].strip().lower()

        return cls(**kwargs)  # type: ignore[arg-type]


def _parse(env: Mapping[str, str], name: str, kind: type) -> object:
    raw = env[name]
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{name}: invalid value {raw!r}") from None
