"""
app/services/aggregation_service.py

State and district aggregation over loaded Aadhaar CSV extracts.

Every helper takes a DataFrame built from :class:`CSVLoadResult` records and
returns a new object; inputs are never modified.

Dataset totals
--------------
enrolment     age_0_5 + age_5_17 + age_18_greater
demographic   demo_age_5_17 + demo_age_17_
biometric     bio_age_5_17 + bio_age_17_
"""

from __future__ import annotations

import logging
from typing import Final, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

DATE_FORMAT: Final[str] = "%d-%m-%Y"
"""Record dates are ``DD-MM-YYYY``."""

ENROLMENT_COLUMNS: Final[tuple[str, ...]] = ("age_0_5", "age_5_17", "age_18_greater")
DEMOGRAPHIC_COLUMNS: Final[tuple[str, ...]] = ("demo_age_5_17", "demo_age_17_")
BIOMETRIC_COLUMNS: Final[tuple[str, ...]] = ("bio_age_5_17", "bio_age_17_")


def unique_states(frame: pd.DataFrame) -> list[str]:
    """
    Sorted distinct state names.
    """

    if frame.empty or "state" not in frame.columns:
        return []
    return sorted(frame["state"].dropna().unique().tolist())


def districts_by_state(frame: pd.DataFrame, state: str) -> list[str]:
    """
    Sorted distinct districts of *state*; empty for an unknown state.
    """

    if frame.empty or "state" not in frame.columns:
        return []
    districts = frame.loc[frame["state"] == state, "district"]
    return sorted(districts.dropna().unique().tolist())


def filter_by_date_range(frame: pd.DataFrame, start: str, end: str) -> pd.DataFrame:
    """
    Rows whose ``date`` falls within [*start*, *end*], both ``DD-MM-YYYY``.

    Rows with an unparsable date are excluded.

    Raises
    ------
    ValueError
        If *start* or *end* is not a ``DD-MM-YYYY`` date.
    """

    start_ts = pd.to_datetime(start, format=DATE_FORMAT)
    end_ts = pd.to_datetime(end, format=DATE_FORMAT)
    if frame.empty:
        return frame.copy()

    dates = pd.to_datetime(frame["date"], format=DATE_FORMAT, errors="coerce")
    unparsed = int(dates.isna().sum())
    if unparsed:
        logger.warning("Excluded %d row(s) with unparsable dates", unparsed)
    return frame.loc[dates.between(start_ts, end_ts)].copy()


def totals_by_state(frame: pd.DataFrame, columns: Sequence[str]) -> pd.Series:
    """
    Per-state sum of *columns*, indexed by state name.

    Missing count columns contribute zero.
    """

    if frame.empty:
        return pd.Series(dtype="int64", name="total")

    present = [column for column in columns if column in frame.columns]
    missing = sorted(set(columns) - set(present))
    if missing:
        logger.warning("Count column(s) missing from frame: %s", ", ".join(missing))

    totals = frame[present].sum(axis=1) if present else pd.Series(0, index=frame.index)
    return totals.groupby(frame["state"]).sum().astype("int64").rename("total")


def enrolments_by_state(frame: pd.DataFrame) -> pd.Series:
    return totals_by_state(frame, ENROLMENT_COLUMNS)


def demographic_updates_by_state(frame: pd.DataFrame) -> pd.Series:
    return totals_by_state(frame, DEMOGRAPHIC_COLUMNS)


def biometric_updates_by_state(frame: pd.DataFrame) -> pd.Series:
    return totals_by_state(frame, BIOMETRIC_COLUMNS)
