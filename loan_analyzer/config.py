"""Runtime settings for the command-line shell, read from the environment.

``LOAN_ANALYZER_TENURE_YEARS``
    Comma separated tenures (years) compared by ``tenures``. Default
    ``18,20,22,25,30``.
``LOAN_ANALYZER_MAX_ROWS``
    Number of schedule rows printed before the table is truncated. Default 120.
``LOAN_ANALYZER_LOG_LEVEL``
    Logging level name. Default ``WARNING``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .errors import InvalidInputError
from .scenarios import DEFAULT_TENURE_YEARS

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    tenure_years: Tuple[int, ...] = tuple(DEFAULT_TENURE_YEARS)
    max_rows: int = 120
    log_level: str = "WARNING"

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def _parse_tenures(value: str) -> Tuple[int, ...]:
    try:
        tenures = tuple(int(part) for part in value.split(",") if part.strip())
    except ValueError as exc:
        raise InvalidInputError(f"Invalid LOAN_ANALYZER_TENURE_YEARS: {value}") from exc
    if not tenures or any(t <= 0 for t in tenures):
        raise InvalidInputError(f"Invalid LOAN_ANALYZER_TENURE_YEARS: {value}")
    return tenures


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    defaults = Settings()

    tenures = defaults.tenure_years
    raw_tenures = env.get("LOAN_ANALYZER_TENURE_YEARS")
    if raw_tenures:
        tenures = _parse_tenures(raw_tenures)

    max_rows = defaults.max_rows
    raw_rows = env.get("LOAN_ANALYZER_MAX_ROWS")
    if raw_rows:
        try:
            max_rows = int(raw_rows)
        except ValueError as exc:
            raise InvalidInputError(f"Invalid LOAN_ANALYZER_MAX_ROWS: {raw_rows}") from exc
        if max_rows <= 0:
            raise InvalidInputError(f"Invalid LOAN_ANALYZER_MAX_ROWS: {raw_rows}")

    log_level = env.get("LOAN_ANALYZER_LOG_LEVEL", defaults.log_level).upper()
    if log_level not in LOG_LEVELS:
        raise InvalidInputError(f"LOAN_ANALYZER_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

    return Settings(tenure_years=tenures, max_rows=max_rows, log_level=log_level)
