"""Plain-text spool usage report."""

import logging
import unicodedata
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from backend.app.services.moonraker import MoonrakerHistoryClient
from backend.app.services.spool_ledger import aggregate_usage

logger = logging.getLogger(__name__)

# Every spool is reported against a 1 kg roll, whatever its roster baseline
REFERENCE_CAPACITY_GRAMS = 1000.0
USAGE_BAR_WIDTH = 20

REPORT_HEADER = ("Spool Name", "Usage (g)", "Remaining (g)", "% Used")


@dataclass
class ReportRow:
    spool_name: str
    used_grams: int
    remaining_grams: int
    usage_bar: str
    percent_used: int

    def cells(self) -> tuple[str, str, str, str]:
        return (
            self.spool_name,
            str(self.used_grams),
            str(self.remaining_grams),
            f"{self.usage_bar} {self.percent_used}%",
        )


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def render_usage_bar(fraction: float, width: int = USAGE_BAR_WIDTH) -> str:
    """Render a gauge like ``[=====>------------]`` exactly ``width`` characters wide.

    The fraction is clamped to [0, 1]; a full gauge has no head.
    """
    inner = width - 2
    fraction = min(1.0, max(0.0, fraction))
    filled = min(inner, int(fraction * inner))
    if filled >= inner:
        return "[" + "=" * inner + "]"
    return "[" + "=" * filled + ">" + "-" * (inner - filled - 1) + "]"


def build_report_rows(ledger: Mapping[str, float]) -> list[ReportRow]:
    """Turn a ledger into report rows sorted by spool name."""
    rows = []
    for name in sorted(ledger):
        grams = ledger[name]
        used = round_half_away(grams)
        rows.append(
            ReportRow(
                spool_name=name,
                used_grams=used,
                remaining_grams=round_half_away(REFERENCE_CAPACITY_GRAMS - grams),
                usage_bar=render_usage_bar(used / REFERENCE_CAPACITY_GRAMS),
                percent_used=round_half_away(grams / REFERENCE_CAPACITY_GRAMS * 100),
            )
        )
    return rows


def display_width(text: str) -> int:
    """Terminal columns taken by text; wide and fullwidth characters take two."""
    return sum(2 if unicodedata.east_asian_width(char) in ("W", "F") else 1 for char in text)


def _pad(text: str, width: int) -> str:
    return text + " " * (width - display_width(text))


def format_table(rows: list[tuple[str, ...]]) -> str:
    """Format rows as a borderless table with a separator line between rows."""
    if not rows:
        return ""
    widths = [max(display_width(row[i]) for row in rows) for i in range(len(rows[0]))]
    separator = "+".join("-" * (w + 2) for w in widths)

    lines = []
    for index, row in enumerate(rows):
        if index:
            lines.append(separator)
        lines.append("|".join(f" {_pad(cell, w)} " for cell, w in zip(row, widths)))
    return "\n".join(lines) + "\n"


def render_usage_table(ledger: Mapping[str, float]) -> str:
    rows = [REPORT_HEADER] + [row.cells() for row in build_report_rows(ledger)]
    return format_table(rows)


async def generate_usage_report(
    client: MoonrakerHistoryClient,
    roster: Mapping[str, float],
    start: int = 108,
    order: str = "asc",
) -> str:
    """Fetch print history, attribute it to spools and render the usage table.

    History transport errors propagate to the caller.
    """
    jobs = await client.get_history_jobs(start=start, order=order)
    ledger = aggregate_usage(roster, jobs)
    logger.info("Usage report: %d jobs across %d spools", len(jobs), len(ledger))
    return render_usage_table(ledger)
