from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

# config.py
DEFAULT_DENSITY = 150  # Resolution used when rasterizing documents
DEFAULT_FUZZ = 1000  # Fuzz passed to the differencer, fixed for a whole run
DEFAULT_SSIM_THRESHOLD = 0.0
PAGE_FILENAME_TEMPLATE = '%03d.png'
LEFT_DIR_NAME = 'left'
RIGHT_DIR_NAME = 'right'
DIFF_DIR_NAME = 'diff'
MATCHED_EXIT_CODES = (0,)
HARD_FAILURE_EXIT_CODES = (2,)
RENDERER_DEFAULT = 'magick'
DIFFER_DEFAULT = 'magick'

ENV_FILE = Path.cwd() / ".env"

_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    global _DOTENV_LOADED

    if _DOTENV_LOADED:
        return
    if ENV_FILE.exists():
        load_dotenv(dotenv_path=ENV_FILE, override=False)
    _DOTENV_LOADED = True


def _as_int(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_float(value: Optional[str], default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _as_codes(value: Optional[str], default: Tuple[int, ...]) -> Tuple[int, ...]:
    if not value:
        return default
    codes = []
    for token in value.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            codes.append(int(token))
        except ValueError:
            return default
    return tuple(codes) or default


@dataclass
class PageDiffSettings:
    density: int = DEFAULT_DENSITY
    fuzz: int = DEFAULT_FUZZ
    renderer: str = RENDERER_DEFAULT
    differ: str = DIFFER_DEFAULT
    magick_binary: Optional[str] = None
    matched_codes: Tuple[int, ...] = MATCHED_EXIT_CODES
    hard_failure_codes: Tuple[int, ...] = HARD_FAILURE_EXIT_CODES
    ssim_threshold: float = DEFAULT_SSIM_THRESHOLD


def load_settings(overrides: Optional[Dict[str, Optional[str]]] = None) -> PageDiffSettings:
    """Return merged settings from .env, environment, and runtime overrides."""

    _load_dotenv_once()

    overrides = {key: value for key, value in (overrides or {}).items() if value is not None}
    env_get = os.environ.get

    density = _as_int(str(overrides.get("density", "")) or env_get("PAGEDIFF_DENSITY"), DEFAULT_DENSITY)
    fuzz = _as_int(str(overrides.get("fuzz", "")) or env_get("PAGEDIFF_FUZZ"), DEFAULT_FUZZ)
    renderer = (overrides.get("renderer") or env_get("PAGEDIFF_RENDERER") or RENDERER_DEFAULT).strip().lower()
    differ = (overrides.get("differ") or env_get("PAGEDIFF_DIFFER") or DIFFER_DEFAULT).strip().lower()
    magick_binary = overrides.get("magick_binary") or env_get("PAGEDIFF_MAGICK")
    hard_failure_codes = _as_codes(
        overrides.get("hard_failure_codes") or env_get("PAGEDIFF_HARD_FAILURE_CODES"),
        HARD_FAILURE_EXIT_CODES,
    )
    matched_codes = _as_codes(
        overrides.get("matched_codes") or env_get("PAGEDIFF_MATCHED_CODES"),
        MATCHED_EXIT_CODES,
    )
    ssim_threshold = _as_float(
        str(overrides.get("ssim_threshold", "")) or env_get("PAGEDIFF_SSIM_THRESHOLD"),
        DEFAULT_SSIM_THRESHOLD,
    )

    return PageDiffSettings(
        density=density,
        fuzz=fuzz,
        renderer=renderer,
        differ=differ,
        magick_binary=magick_binary,
        matched_codes=matched_codes,
        hard_failure_codes=hard_failure_codes,
        ssim_threshold=ssim_threshold,
    )
