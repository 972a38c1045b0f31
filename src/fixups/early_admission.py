"""Early-round program corrections.

Builds the field changes that bring one stored record in line with its
verified early-admission policy:
    - earlyActionType set to the policy's expected type (SCEA, REA, EA)
    - ED applicant data and deadline cleared for schools without ED
    - earlyActionType "EA" for any record with an EA deadline but no type

The result is a wire-named dict ready for CollegeStore.update; an empty
dict means the record is already correct.
"""

import logging

from src.schemas.models import CollegeRecord, EarlyAdmissionPolicy

logger = logging.getLogger(__name__)

ED_FIELDS = (
    "earlyDecisionApplied",
    "earlyDecisionAdmitted",
    "earlyDecisionAdmitRate",
    "edDeadline",
)

REGULAR_EA = "EA"


def has_ed_data(record: CollegeRecord) -> bool:
    return bool(record.early_decision_applied or record.ed_deadline)


def early_admission_fix(
    record: CollegeRecord, policy: EarlyAdmissionPolicy | None = None
) -> dict[str, object]:
    """Return the field changes needed for ``record``.

    Args:
        record: Stored college record.
        policy: Verified policy for the record's slug, if one exists.
            Without a policy only the regular-EA default applies.
    """
    changes: dict[str, object] = {}

    if policy is not None:
        if policy.expected_ea_type and record.early_action_type != policy.expected_ea_type:
            changes["earlyActionType"] = policy.expected_ea_type
        if not policy.has_ed and has_ed_data(record):
            changes.update(dict.fromkeys(ED_FIELDS))

    if "earlyActionType" not in changes and record.ea_deadline and not record.early_action_type:
        changes["earlyActionType"] = REGULAR_EA
    return changes
