#!/usr/bin/env python3
from __future__ import annotations
import argparse
import json
import sys

from shipquote.core.config import settings
from shipquote.core.logging import configure_logging
from shipquote.db.seed import build_seed_payload
from shipquote.services.shipping.engine_config import EngineConfig
from shipquote.services.shipping.quote_service import QuoteOptions, ShippingQuoteService
from shipquote.services.shipping.reference_data import InMemoryReferenceData, SqlReferenceData
from shipquote.services.shipping.zone_cache import NullZoneCache
from shipquote.utils.serialization import to_jsonable


'''
Prints one shipping quote as JSON.
    - --dry-run uses the built-in seed data instead of the database
    - usage:
    python scripts/quote_once.py --delivery 560001 --weight 1.2 --qty 2 --order-value 899 --cod
'''
def main():
    ap = argparse.ArgumentParser(description="Calculate a single shipping quote.")
    ap.add_argument("--pickup", default=settings.DEFAULT_PICKUP_PINCODE, help="pickup pincode")
    ap.add_argument("--delivery", required=True, help="delivery pincode")
    ap.add_argument("--weight", type=float, default=None, help="item weight in kg (default item weight when omitted)")
    ap.add_argument("--dims", default=None, help="LxWxH in cm, e.g. 30x20x10")
    ap.add_argument("--qty", type=int, default=1)
    ap.add_argument("--order-value", type=float, default=0)
    ap.add_argument("--cod", action="store_true")
    ap.add_argument("--collect-amount", type=float, default=None, help="COD amount (default: order value)")
    ap.add_argument("--fragile", action="store_true")
    ap.add_argument("--electronics", action="store_true")
    ap.add_argument("--dry-run", action="store_true", help="use in-memory seed data")
    args = ap.parse_args()

    configure_logging()

    item = {"weight": args.weight, "quantity": args.qty}
    if args.dims:
        try:
            length, width, height = (float(x) for x in args.dims.lower().split("x"))
        except ValueError:
            print("ERROR: --dims must look like 30x20x10", file=sys.stderr)
            sys.exit(2)
        item["dimensions"] = {"length": length, "width": width, "height": height}

    opts = QuoteOptions.from_mapping({
        "cod": args.cod,
        "collect_amount": args.collect_amount if args.collect_amount is not None else args.order_value,
        "has_fragile_items": args.fragile,
        "has_electronics": args.electronics,
    })
    cfg = EngineConfig.from_settings(settings)

    if args.dry_run:
        svc = ShippingQuoteService(InMemoryReferenceData.from_seed(build_seed_payload()), cfg, NullZoneCache())
        quote = svc.calculate_shipping_charges(args.pickup, args.delivery, [item], args.order_value, opts)
    else:
        from shipquote.db.session import session_scope
        with session_scope() as db:
            svc = ShippingQuoteService(SqlReferenceData(db), cfg, NullZoneCache())
            quote = svc.calculate_shipping_charges(args.pickup, args.delivery, [item], args.order_value, opts)

    print(json.dumps(to_jsonable(quote), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
