#!/usr/bin/env python3
"""
seed_data.py

Generates a realistic fake stockout-prediction batch and either writes it as
JSON or posts it to the ingest boundary of a running service.

Run:
  python -m inventory_health.backend.seed_data --stores 5 --skus 40 --output batch.json
  python -m inventory_health.backend.seed_data --api-url http://127.0.0.1:8000
"""

from __future__ import annotations
import argparse
import json
import random
import string
import sys
from typing import Dict, List, Optional

import httpx

from inventory_health.config import get_config
from inventory_health.data.models import StockoutSentinel
from inventory_health.data.validation import classify_days
from inventory_health.logging import get_logger

# -----------------------------
# Config & helper structures
# -----------------------------

CITIES = ["Vancouver", "Seattle", "Portland", "Denver", "Dallas", "Chicago", "New York", "Boston", "Toronto"]

CATEGORIES = ["Beverages", "Snacks", "Household", "Personal Care", "Produce", "Frozen"]

# share of SKUs with no recent sales (never stock out)
IDLE_SHARE = 0.05

logger = get_logger(__name__)


# -----------------------------
# Utility functions
# -----------------------------

def rand_sku() -> str:
    return "SKU-" + "".join(random.choices(string.ascii_uppercase + string.digits, k=6))


def reorder_quantity(avg_daily_sales: float, current_stock: float, cover_days: int = 14) -> int:
    """Units needed to cover `cover_days` of sales on top of current stock."""
    return max(0, int(round(avg_daily_sales * cover_days - current_stock)))


# -----------------------------
# Core generators
# -----------------------------

def gen_stores(n: int) -> List[Dict]:
    return [{"store_id": f"S{i:03d}", "city": random.choice(CITIES)} for i in range(1, n + 1)]


def gen_skus(n: int) -> List[Dict]:
    return [{"sku_id": rand_sku(), "category": random.choice(CATEGORIES)} for _ in range(n)]


def gen_predictions(stores: List[Dict], skus: List[Dict]) -> List[Dict]:
    """One prediction per (store, sku) with status from the documented thresholds."""
    config = get_config()
    predictions = []
    for s in stores:
        for p in skus:
            current_stock = max(0, int(random.gauss(40, 20)))
            if random.random() < IDLE_SHARE:
                avg_daily_sales = 0.0
            else:
                avg_daily_sales = round(random.uniform(0.5, 12.0), 2)
            if avg_daily_sales == 0:
                days = StockoutSentinel.NEVER
            else:
                days = round(current_stock / avg_daily_sales, 1)
            status = classify_days(days, config.critical_days_threshold, config.warning_days_threshold)
            predictions.append({
                "sku_id": p["sku_id"],
                "store_id": s["store_id"],
                "current_stock": current_stock,
                "avg_daily_sales": avg_daily_sales,
                "days_to_stockout": days.value if days is StockoutSentinel.NEVER else days,
                "status": status.value,
                "recommended_reorder_quantity": reorder_quantity(avg_daily_sales, current_stock),
                "category": p["category"],
                "city": s["city"],
            })
    return predictions


def post_batch(api_url: str, predictions: List[Dict], timeout: float = 10.0) -> Dict:
    """POST a batch to the ingest boundary and return its acknowledgement."""
    res = httpx.post(f"{api_url.rstrip('/')}/predictions", json={"predictions": predictions}, timeout=timeout)
    res.raise_for_status()
    return res.json()


# -----------------------------
# CLI
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()
    parser = argparse.ArgumentParser(description="Generate a fake stockout-prediction batch.")
    parser.add_argument("--stores", type=int, default=config.default_seed_stores)
    parser.add_argument("--skus", type=int, default=config.default_seed_skus)
    parser.add_argument("--seed", type=int, default=config.default_seed_value)
    parser.add_argument("--output", type=str, default=None, help="Write the batch as JSON to this path.")
    parser.add_argument("--api-url", type=str, default=None, help="POST the batch to this service.")
    args = parser.parse_args(argv)

    if not args.output and not args.api_url:
        print("Nothing to do: pass --output and/or --api-url", file=sys.stderr)
        return 2

    random.seed(args.seed)
    predictions = gen_predictions(gen_stores(args.stores), gen_skus(args.skus))

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump({"predictions": predictions}, f, indent=2)
        logger.info(f"Wrote {len(predictions)} predictions to {args.output}")

    if args.api_url:
        try:
            ack = post_batch(args.api_url, predictions)
        except httpx.HTTPError as e:
            logger.error(f"Failed to post batch to {args.api_url}: {e}")
            return 1
        logger.info(f"Service accepted {ack.get('count')} predictions")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
