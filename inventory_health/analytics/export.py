from __future__ import annotations

import csv
import io
from decimal import Decimal
from typing import List, Sequence

from inventory_health.data.models import PredictionRecord
from inventory_health.errors import EmptyExportError
from inventory_health.logging import get_logger

EXPORT_HEADERS = [
    "SKU", "Store", "Current Stock", "Avg Daily Sales", "Days to Stockout",
    "Status", "Reorder Qty", "Category", "City",
]

INFINITY_GLYPH = "∞"
MISSING = "-"

logger = get_logger(__name__)


def _format_number(value: float) -> str:
    # 5.0 renders as "5", 5.5 as "5.5", 1e-05 as "0.00001"
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def format_row(record: PredictionRecord) -> List[str]:
    """Render one record as the export's nine text cells."""
    if record.never_stocks_out:
        days = INFINITY_GLYPH
    else:
        days = f"{record.days_to_stockout:.1f}"
    return [
        record.sku_id,
        record.store_id,
        _format_number(record.current_stock),
        f"{record.avg_daily_sales:.2f}",
        days,
        record.status.value,
        str(record.reorder_quantity),
        record.category or MISSING,
        record.city or MISSING,
    ]


def encode_csv(view: Sequence[PredictionRecord]) -> str:
    """Encode an ordered view as CSV text, header row first.

    Every cell is quoted; embedded quotes are doubled. Rows are joined by "\\n".

    Args:
        view (Sequence[PredictionRecord]): Records in display order.
    Returns:
        str: The CSV document.
    Raises:
        EmptyExportError: If `view` is empty; no header-only document is produced.
    """
    if not view:
        logger.info("Export skipped: no rows in the current view")
        raise EmptyExportError()
    buf = io.StringIO()
    w = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    w.writerow(EXPORT_HEADERS)
    for r in view:
        w.writerow(format_row(r))
    logger.info(f"Exported {len(view)} rows")
    # No trailing newline after the last row
    return buf.getvalue().rstrip("\n")
