"""
app/domain/regions.py

Static per-region base statistics used by the filtered metrics calculator.

The table is immutable and embedded at build time. Every row is validated
once when the module is imported: a friction ratio below 1.0 would mean
fewer update attempts than theoretically necessary, which the data never
models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

ALL_REGIONS = "ALL"
"""Sentinel region code selecting every row of the table."""


class RegionTableError(ValueError):
    """
    Raised when a region statistics table violates its invariants.
    """


@dataclass(frozen=True)
class RegionStat:
    """
    Baseline annual activity for one region.
    """

    code: str
    name: str
    enrolments: int
    updates: int
    friction_ratio: float
    """Total update attempts over ideal attempts; always >= 1.0."""


def build_region_table(rows: Iterable[RegionStat]) -> tuple[RegionStat, ...]:
    """
    Validate *rows* and return them as an immutable table.

    Raises
    ------
    RegionTableError
        On a duplicated code, a negative count or a friction ratio below 1.0.
    """

    table = tuple(rows)
    seen: set[str] = set()
    for row in table:
        if row.code in seen:
            raise RegionTableError(f"Duplicate region code '{row.code}'.")
        seen.add(row.code)
        if row.code == ALL_REGIONS:
            raise RegionTableError(f"Region code '{ALL_REGIONS}' is reserved.")
        if row.enrolments < 0 or row.updates < 0:
            raise RegionTableError(f"Region '{row.code}' has a negative count.")
        if row.friction_ratio < 1.0:
            raise RegionTableError(
                f"Region '{row.code}' friction ratio {row.friction_ratio} is below 1.0."
            )
    return table


REGION_STATS: tuple[RegionStat, ...] = build_region_table(
    (
        RegionStat("MH", "Maharashtra", 2_850_000, 4_132_500, 1.45),
        RegionStat("UP", "Uttar Pradesh", 3_200_000, 5_184_000, 1.62),
        RegionStat("KA", "Karnataka", 1_450_000, 1_711_000, 1.18),
        RegionStat("TN", "Tamil Nadu", 1_680_000, 2_049_600, 1.22),
        RegionStat("GJ", "Gujarat", 1_320_000, 1_782_000, 1.35),
        RegionStat("RJ", "Rajasthan", 1_580_000, 2_338_400, 1.48),
        RegionStat("WB", "West Bengal", 1_720_000, 2_666_000, 1.55),
        RegionStat("MP", "Madhya Pradesh", 1_450_000, 2_059_000, 1.42),
        RegionStat("BR", "Bihar", 1_890_000, 3_175_200, 1.68),
        RegionStat("AP", "Andhra Pradesh", 1_120_000, 1_400_000, 1.25),
        RegionStat("TS", "Telangana", 890_000, 1_023_500, 1.15),
        RegionStat("KL", "Kerala", 680_000, 734_400, 1.08),
        RegionStat("OD", "Odisha", 920_000, 1_269_600, 1.38),
        RegionStat("PB", "Punjab", 620_000, 793_600, 1.28),
        RegionStat("HR", "Haryana", 580_000, 765_600, 1.32),
    )
)

# Every state/UT offered by the region selector. Codes without a row in
# REGION_STATS select an empty working set.
REGION_CHOICES: Mapping[str, str] = {
    ALL_REGIONS: "All States",
    "AP": "Andhra Pradesh",
    "AR": "Arunachal Pradesh",
    "AS": "Assam",
    "BR": "Bihar",
    "CG": "Chhattisgarh",
    "GA": "Goa",
    "GJ": "Gujarat",
    "HR": "Haryana",
    "HP": "Himachal Pradesh",
    "JH": "Jharkhand",
    "KA": "Karnataka",
    "KL": "Kerala",
    "MP": "Madhya Pradesh",
    "MH": "Maharashtra",
    "MN": "Manipur",
    "ML": "Meghalaya",
    "MZ": "Mizoram",
    "NL": "Nagaland",
    "OD": "Odisha",
    "PB": "Punjab",
    "RJ": "Rajasthan",
    "SK": "Sikkim",
    "TN": "Tamil Nadu",
    "TS": "Telangana",
    "TR": "Tripura",
    "UP": "Uttar Pradesh",
    "UK": "Uttarakhand",
    "WB": "West Bengal",
    "JK": "Jammu & Kashmir",
    "LA": "Ladakh",
    "DL": "Delhi",
    "PY": "Puducherry",
    "CH": "Chandigarh",
    "AN": "Andaman & Nicobar",
    "DN": "Dadra & Nagar Haveli",
    "LD": "Lakshadweep",
}


def select_regions(
    region: str,
    table: Iterable[RegionStat] = REGION_STATS,
) -> tuple[RegionStat, ...]:
    """
    Return the working set for *region*: every row for the ``ALL`` sentinel,
    otherwise the rows whose code matches (possibly none).
    """

    rows = tuple(table)
    if region == ALL_REGIONS:
        return rows
    return tuple(row for row in rows if row.code == region)
