"""Early-admission audits.

verify_policies compares verified institutional policies (which early
rounds a college offers, and its early-action type) against stored
records. group_early_action_types buckets every college with an
early-action deadline by program type.
"""

import logging
from dataclasses import dataclass, field

from src.schemas.models import CollegeRecord, EarlyAdmissionPolicy
from src.store.base import CollegeStore

logger = logging.getLogger(__name__)


@dataclass
class PolicyVerification:
    """Outcome of checking every verified policy against the store.

    Fields:
        verified:  Slugs whose stored data matches the policy
        errors:    Slug -> list of mismatch descriptions
        not_found: Policy slugs with no stored record
    """
    verified: list[str] = field(default_factory=list)
    errors: dict[str, list[str]] = field(default_factory=dict)
    not_found: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors


def check_policy(record: CollegeRecord, policy: EarlyAdmissionPolicy) -> list[str]:
    """Return mismatches between one record and its verified policy."""
    issues = []
    if policy.expected_ea_type and record.early_action_type != policy.expected_ea_type:
        issues.append(
            f"EA Type: expected {policy.expected_ea_type}, got {record.early_action_type}"
        )

    if policy.has_ea and not record.ea_deadline:
        issues.append("Should have EA deadline but doesn't")
    if not policy.has_ea and record.ea_deadline:
        issues.append(f"Has EA deadline but shouldn't: {record.ea_deadline}")

    if policy.has_ed and not record.ed_deadline:
        issues.append("Should have ED deadline but doesn't")
    if not policy.has_ed and record.ed_deadline:
        issues.append(f"Has ED deadline but shouldn't: {record.ed_deadline}")

    if not policy.has_ed and record.early_decision_applied:
        issues.append(
            f"Has ED application data but shouldn't: {record.early_decision_applied} applied"
        )
    return issues


def verify_policies(
    store: CollegeStore, policies: list[EarlyAdmissionPolicy]
) -> PolicyVerification:
    """Check each verified policy against the stored record for its slug."""
    outcome = PolicyVerification()
    for policy in policies:
        record = store.get(policy.slug)
        if record is None:
            logger.warning("%s (%s) not found in store", policy.name, policy.slug)
            outcome.not_found.append(policy.slug)
            continue
        issues = check_policy(record, policy)
        if issues:
            outcome.errors[policy.slug] = issues
        else:
            outcome.verified.append(policy.slug)
    logger.info(
        "Early admission verification: %d verified, %d errors, %d not found",
        len(outcome.verified), len(outcome.errors), len(outcome.not_found),
    )
    return outcome


def group_early_action_types(records: list[CollegeRecord]) -> dict[str, list[CollegeRecord]]:
    """Group colleges that offer early action by program type.

    A null or unrecognized type counts as regular EA.
    """
    groups: dict[str, list[CollegeRecord]] = {"SCEA": [], "REA": [], "EA": []}
    offering = sorted(
        (r for r in records if r.ea_deadline),
        key=lambda r: r.name or "",
    )
    for record in offering:
        kind = record.early_action_type if record.early_action_type in ("SCEA", "REA") else "EA"
        groups[kind].append(record)
    return groups


def format_verification(outcome: PolicyVerification) -> str:
    lines = []
    for slug, issues in outcome.errors.items():
        lines.append(f"[X] {slug}:")
        lines.extend(f"     - {issue}" for issue in issues)
    for slug in outcome.not_found:
        lines.append(f"[!] {slug}: NOT FOUND IN STORE")
    for slug in outcome.verified:
        lines.append(f"[+] {slug}: Correct")
    lines.extend([
        "",
        f"Verified: {len(outcome.verified)}",
        f"Errors: {len(outcome.errors)}",
        f"Warnings: {len(outcome.not_found)}",
    ])
    return "\n".join(lines)


def format_ea_groups(groups: dict[str, list[CollegeRecord]], limit: int = 30) -> str:
    lines = ["=== SCEA (Single-Choice Early Action) ==="]
    lines.extend(f"  {r.name}: SCEA" for r in groups["SCEA"])
    lines.append("")
    lines.append("=== REA (Restrictive Early Action) ===")
    lines.extend(f"  {r.name}: REA" for r in groups["REA"])
    lines.append("")
    regular = groups["EA"]
    lines.append(f"=== Regular EA ({len(regular)} schools) ===")
    lines.extend(f"  {r.name}: {r.early_action_type or 'null'}" for r in regular[:limit])
    if len(regular) > limit:
        lines.append(f"  ... and {len(regular) - limit} more")
    return "\n".join(lines)
