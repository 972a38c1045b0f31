#!/usr/bin/env python3
"""Normalize sub-documents and early-round fields on stored college records.

Applies the pure fixups in src.fixups to stored college records and
writes the changed fields back through the store's update-by-slug:
    --race             race/ethnicity group names (src.fixups.normalize)
    --recommendations  Recommendation(s) admission factor backfill
    --early-admission  EA type and ED data from the verified policies
                       in the reference data (src.fixups.early_admission)

Usage:
    python scripts/normalize_subdocuments.py --race                 # Race keys, default slugs
    python scripts/normalize_subdocuments.py --recommendations      # Recommendation(s) backfill
    python scripts/normalize_subdocuments.py --race --dry-run       # Show changes only
    python scripts/normalize_subdocuments.py --race --slug morehouse-college --placeholders
    python scripts/normalize_subdocuments.py --early-admission --dry-run
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path for src imports
_SCRIPT_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _SCRIPT_DIR.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from src.config import database_url  # noqa: E402
from src.fixups.early_admission import early_admission_fix  # noqa: E402
from src.fixups.normalize import (  # noqa: E402
    backfill_recommendations,
    has_recommendations,
    normalize_race_ethnicity,
)
from src.paths import COLLEGES_EXPORT_PATH  # noqa: E402
from src.schemas.models import EarlyAdmissionPolicy  # noqa: E402
from src.store import CollegeStore, StoreUnavailableError, open_store  # noqa: E402
from src.validation import ReferenceDataError, load_reference_data  # noqa: E402
from src.validation.subdocuments import parse_subdocument  # noqa: E402

logger = logging.getLogger(__name__)

# US colleges whose race/ethnicity maps use variant group names.
RACE_FIX_SLUGS = [
    "california-institute-of-technology",
    "morehouse-college",
    "spelman-college",
    "hampton-university",
    "florida-am-university",
    "north-carolina-central-university",
    "montana-state-university",
    "montana-tech",
    "wyoming-catholic-college",
    "delaware-state-university",
    "university-of-montana",
    "carroll-college",
    "west-virginia-wesleyan-college",
    "byu-idaho",
]

# HBCUs that report no White or Asian share; given a placeholder of 1.
RACE_PLACEHOLDER_SLUGS = [
    "morehouse-college",
    "spelman-college",
    "hampton-university",
    "florida-am-university",
    "north-carolina-central-university",
    "delaware-state-university",
]

# Colleges that do not consider recommendation letters.
NO_RECOMMENDATIONS_SLUGS = [
    "university-of-california-berkeley",
    "university-of-california-los-angeles",
    "university-of-california-san-diego",
    "university-of-california-davis",
    "university-of-california-irvine",
    "university-of-california-santa-barbara",
    "university-of-california-santa-cruz",
    "university-of-california-riverside",
    "university-of-california-merced",
    "cal-poly-san-luis-obispo",
    "san-diego-state-university",
    "cal-state-fullerton",
    "cal-state-long-beach",
    "san-jose-state-university",
    "university-of-florida",
    "penn-state-university",
    "university-of-minnesota-twin-cities",
    "university-of-minnesota",
    "arizona-state-university",
    "george-mason-university",
    "texas-am-university",
    "university-of-tennessee",
    "university-of-mississippi",
    "university-of-south-florida",
    "university-of-central-florida",
    "florida-state-university",
    "university-of-texas-austin",
    "university-of-texas-dallas",
    "university-of-arizona",
    "university-of-colorado-boulder",
    "colorado-state-university",
    "university-of-iowa",
    "iowa-state-university",
    "university-of-kansas",
    "kansas-state-university",
    "university-of-oregon",
    "oregon-state-university",
    "washington-state-university",
    "indiana-university-bloomington",
    "purdue-university",
]


def fix_race_ethnicity(
    store: CollegeStore,
    slugs: list[str],
    placeholder_slugs: set[str],
    dry_run: bool = False,
) -> int:
    """Normalize raceEthnicity for each slug. Returns the number updated."""
    updated = 0
    for slug in slugs:
        record = store.get(slug)
        if record is None or not record.race_ethnicity:
            logger.warning("Skipping %s - not found or no data", slug)
            continue
        parsed = parse_subdocument(record.race_ethnicity)
        if not isinstance(parsed, dict):
            logger.warning("Skipping %s - race/ethnicity not parseable", slug)
            continue

        normalized = normalize_race_ethnicity(parsed, add_placeholders=slug in placeholder_slugs)
        if normalized == parsed:
            logger.info("Already normalized: %s", slug)
            continue

        after = json.dumps(normalized)
        logger.info("%s: %s -> %s", slug, record.race_ethnicity, after)
        if not dry_run and store.update(slug, {"raceEthnicity": after}):
            updated += 1
    return updated


def fix_recommendations(store: CollegeStore, slugs: list[str], dry_run: bool = False) -> int:
    """Backfill the Recommendation(s) factor for each slug. Returns the number updated."""
    updated = 0
    for slug in slugs:
        record = store.get(slug)
        if record is None:
            logger.warning("College not found: %s", slug)
            continue
        parsed = parse_subdocument(record.admission_considerations)
        if not isinstance(parsed, dict):
            logger.warning("No admissionConsiderations for: %s", slug)
            continue
        if has_recommendations(parsed):
            logger.info("Already has recommendations field: %s", slug)
            continue

        after = json.dumps(backfill_recommendations(parsed))
        logger.info("%s: %s -> %s", slug, record.admission_considerations, after)
        if not dry_run and store.update(slug, {"admissionConsiderations": after}):
            updated += 1
    return updated


def fix_early_admission(
    store: CollegeStore,
    policies: list[EarlyAdmissionPolicy],
    slugs: list[str] | None = None,
    dry_run: bool = False,
) -> int:
    """Apply early-round corrections to every stored record. Returns the number updated."""
    by_slug = {policy.slug: policy for policy in policies}
    wanted = set(slugs) if slugs else None
    updated = 0
    for record in store.fetch_all():
        if wanted is not None and record.slug not in wanted:
            continue
        changes = early_admission_fix(record, by_slug.get(record.slug))
        if not changes:
            continue

        stored = record.model_dump(by_alias=True)
        before = {key: stored.get(key) for key in changes}
        logger.info("%s: %s -> %s", record.slug, before, changes)
        if not dry_run and store.update(record.slug, changes):
            updated += 1
    return updated


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Normalize college sub-documents")
    parser.add_argument("--source", type=str, help="JSON export path or database URL")
    parser.add_argument("--race", action="store_true", help="Normalize race/ethnicity keys")
    parser.add_argument("--recommendations", action="store_true",
                        help="Backfill Recommendation(s) as Not Considered")
    parser.add_argument("--early-admission", action="store_true",
                        help="Correct EA types and clear ED data from the verified policies")
    parser.add_argument("--reference", type=Path,
                        help="Reference data JSON file holding the early-admission policies")
    parser.add_argument("--slug", action="append",
                        help="Limit to this slug (repeatable); default is the built-in list")
    parser.add_argument("--placeholders", action="store_true",
                        help="Give White/Asian a placeholder of 1 for every selected slug")
    parser.add_argument("--dry-run", action="store_true", help="Log changes without writing")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if not (args.race or args.recommendations or args.early_admission):
        parser.error("choose at least one of --race, --recommendations or --early-admission")

    try:
        store = open_store(args.source or database_url() or str(COLLEGES_EXPORT_PATH))
        if args.race:
            slugs = args.slug or RACE_FIX_SLUGS
            placeholders = set(slugs) if args.placeholders else set(RACE_PLACEHOLDER_SLUGS)
            count = fix_race_ethnicity(store, slugs, placeholders, dry_run=args.dry_run)
            print(f"Race/ethnicity: updated {count} colleges")
        if args.recommendations:
            count = fix_recommendations(store, args.slug or NO_RECOMMENDATIONS_SLUGS,
                                        dry_run=args.dry_run)
            print(f"Recommendation(s): updated {count} colleges")
        if args.early_admission:
            reference = load_reference_data(args.reference)
            count = fix_early_admission(store, reference.early_admission_policies,
                                        slugs=args.slug, dry_run=args.dry_run)
            print(f"Early admission: updated {count} colleges")
    except (ReferenceDataError, StoreUnavailableError) as exc:
        print(f"ERROR: {exc}")
        return 1

    if args.dry_run:
        print("Dry run: no records were written")
    return 0


if __name__ == "__main__":
    sys.exit(main())
