#!/usr/bin/env python3
"""
Eligibility Preview Script

Shows what the next tick would do right now without touching the network:
every monitored id with its category and trading status, then the batches
that would be sent to the proof service.

Usage:
    python scripts/preview_eligibility.py                 # built-in catalog
    python scripts/preview_eligibility.py "0-17,6000-6010"
    ASSET_IDS_OVERRIDE="5000-5600" python scripts/preview_eligibility.py
"""

import os
import sys
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from config.assets import ASSETS
from config.constants import MAX_BATCH_SIZE
from core.batcher import chunk
from core.calendar_policy import is_eligible, to_venue_local
from core.catalog import IdentifierCatalog, format_id_ranges


WEEKDAY_NAMES = {1: 'Mon', 2: 'Tue', 3: 'Wed', 4: 'Thu', 5: 'Fri', 6: 'Sat', 7: 'Sun'}


def main():
    override = sys.argv[1] if len(sys.argv) > 1 else os.getenv('ASSET_IDS_OVERRIDE', '')

    catalog = IdentifierCatalog.from_mapping(ASSETS)
    monitored = catalog.monitored_set(override)
    now = datetime.now(timezone.utc)
    weekday, minute = to_venue_local(now)

    print("=" * 80)
    print(f"Now: {now.isoformat()} | New York: {WEEKDAY_NAMES[weekday]} {minute // 60:02d}:{minute % 60:02d}")
    print(f"Source: {'override ' + repr(override) if override else 'built-in catalog'}")
    print(f"Monitored: {len(monitored)} ids ({format_id_ranges(monitored)})")
    print("=" * 80)

    eligible = []
    by_category = Counter()
    for identifier in monitored:
        category = catalog.category_of(identifier)
        allowed = is_eligible(category, now)
        by_category[(category.value, allowed)] += 1
        if allowed:
            eligible.append(identifier)

        asset = catalog.get(identifier)
        label = f"{asset.symbol:<10} {asset.name}" if asset else "(inferred)"
        print(f"  {identifier:>6}  {category.value:<16} {'OPEN ' if allowed else 'closed'}  {label}")

    print("\n" + "-" * 80)
    for (category, allowed), count in sorted(by_category.items()):
        print(f"  {category:<16} {'open' if allowed else 'closed':<7} {count}")

    batches = chunk(eligible, MAX_BATCH_SIZE)
    print("-" * 80)
    if not batches:
        print("No eligible identifiers: the next tick would make no network calls.")
    for index, batch in enumerate(batches, start=1):
        print(f"Batch {index}/{len(batches)}: {len(batch)} ids ({format_id_ranges(batch)})")
    print("=" * 80)


if __name__ == "__main__":
    main()
