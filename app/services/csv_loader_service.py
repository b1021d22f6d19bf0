"""
app/services/csv_loader_service.py

Loader for the public Aadhaar CSV extracts (enrolment, demographic updates,
biometric updates).

Sources are local paths or ``http(s)`` URLs resolved against the configured
data root. Several sources are fetched in parallel and concatenated in the
order they were requested. A failed load never raises: the caller receives
an empty result carrying the error message, and the failure is logged.
"""

from __future__ import annotations

import csv
import io
import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence, Union

import pandas as pd
import requests

from app.config import CSVSourceSettings, get_csv_source_settings
from app.logging_utils import elapsed_ms, log_event

logger = logging.getLogger(__name__)

NUMERIC_COLUMN_PREFIXES: tuple[str, ...] = ("age_", "demo_age_", "bio_age_")

ENROLMENT_FILE = "aadhaar_enrolment_monthly.csv"
DEMOGRAPHIC_FILE = "aadhaar_demographic_updates_monthly.csv"
BIOMETRIC_FILES: tuple[str, ...] = (
    "api_data_aadhar_biometric/api_data_aadhar_biometric_0_500000.csv",
    "api_data_aadhar_biometric/api_data_aadhar_biometric_500000_1000000.csv",
    "api_data_aadhar_biometric/api_data_aadhar_biometric_1000000_1500000.csv",
    "api_data_aadhar_biometric/api_data_aadhar_biometric_1500000_1861108.csv",
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

Record = dict[str, Union[str, int]]


class CSVSourceError(RuntimeError):
    """
    Raised internally when one source cannot be fetched.
    """


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedCSV:
    records: list[Record]
    rows_dropped: int = 0


def is_numeric_column(header: str) -> bool:
    return header.startswith(NUMERIC_COLUMN_PREFIXES)


def parse_count(value: str) -> int:
    """
    Integer prefix of *value*; ``"12abc"`` gives 12, anything unparsable 0.
    """

    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def parse_csv(text: str) -> ParsedCSV:
    """
    Parse CSV *text* with a header row into typed records.

    Values are trimmed. Columns prefixed ``age_``, ``demo_age_`` or
    ``bio_age_`` become integers; all others stay strings. Rows whose field
    count differs from the header (blank lines included) are dropped and
    counted.
    """

    stripped = text.lstrip("\ufeff").strip()
    if not stripped:
        return ParsedCSV(records=[])

    reader = csv.reader(io.StringIO(stripped))
    headers = [header.strip() for header in next(reader)]
    numeric = [is_numeric_column(header) for header in headers]

    records: list[Record] = []
    dropped = 0
    for row in reader:
        if len(row) != len(headers):
            dropped += 1
            continue
        record: Record = {}
        for header, is_numeric, raw in zip(headers, numeric, row):
            value = raw.strip()
            record[header] = parse_count(value) if is_numeric else value
        records.append(record)

    return ParsedCSV(records=records, rows_dropped=dropped)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CSVLoadResult:
    """
    Outcome of loading one dataset from one or more sources.
    """

    records: list[Record] = field(default_factory=list)
    rows_dropped: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame.from_records(self.records)


class CSVLoader:
    """
    Fetches and parses CSV sources, several at a time.
    """

    def __init__(
        self,
        *,
        settings: CSVSourceSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings or get_csv_source_settings()
        self._session = session or requests.Session()

    def resolve(self, source: str) -> str:
        """
        Absolute location of *source*; relative names join the data root.
        """

        if _is_url(source) or Path(source).is_absolute():
            return source
        root = self._settings.data_root
        if _is_url(root):
            return f"{root.rstrip('/')}/{source.lstrip('/')}"
        return str(Path(root) / source)

    def load(self, sources: Sequence[str]) -> CSVLoadResult:
        """
        Load and concatenate *sources* in parallel.

        Any failing source fails the whole load: partial datasets would
        silently skew state totals.
        """

        locations = [self.resolve(source) for source in sources]
        if not locations:
            return CSVLoadResult()

        started = time.perf_counter()
        workers = min(self._settings.max_workers, len(locations))
        try:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                parsed_sources = list(pool.map(self._fetch, locations))
        except CSVSourceError as exc:
            log_event(
                logger,
                logging.ERROR,
                "csv_load_failed",
                sources=locations,
                error=str(exc),
                elapsed_ms=elapsed_ms(started),
            )
            return CSVLoadResult(error=str(exc))

        records: list[Record] = []
        dropped = 0
        for parsed in parsed_sources:
            records.extend(parsed.records)
            dropped += parsed.rows_dropped

        log_event(
            logger,
            logging.INFO,
            "csv_load_completed",
            sources=len(locations),
            records=len(records),
            rows_dropped=dropped,
            elapsed_ms=elapsed_ms(started),
        )
        return CSVLoadResult(records=records, rows_dropped=dropped)

    def load_enrolment(self) -> CSVLoadResult:
        return self.load([ENROLMENT_FILE])

    def load_demographic_updates(self) -> CSVLoadResult:
        return self.load([DEMOGRAPHIC_FILE])

    def load_biometric_updates(self) -> CSVLoadResult:
        return self.load(list(BIOMETRIC_FILES))

    def _fetch(self, location: str) -> ParsedCSV:
        text = self._read(location)
        try:
            return parse_csv(text)
        except csv.Error as exc:
            raise CSVSourceError(f"Failed to parse {location}: {exc}") from exc

    def _read(self, location: str) -> str:
        if _is_url(location):
            try:
                response = self._session.get(location, timeout=self._settings.timeout_seconds)
                response.raise_for_status()
            except requests.RequestException as exc:
                raise CSVSourceError(f"Failed to fetch {location}: {exc}") from exc
            return response.text

        try:
            return Path(location).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise CSVSourceError(f"Failed to read {location}: {exc}") from exc


def _is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))
