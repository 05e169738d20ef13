#!/usr/bin/env python3
from __future__ import annotations
import json

from shipquote.core.logging import configure_logging
from shipquote.db.seed import seed_database
from shipquote.db.session import session_scope


'''
Writes the default weight slabs, zone rates, insurance tiers, admin thresholds
and sample pincodes. Safe to re-run: rows are updated in place.
    - usage (PYTHONPATH=backend, tables created by `alembic upgrade head`):
    python scripts/seed_reference_data.py
'''
def main():
    logger = configure_logging()
    with session_scope() as db:
        counts = seed_database(db)
    logger.info("reference data seeded: %s", counts)
    print(json.dumps(counts, indent=2))


if __name__ == "__main__":
    main()
