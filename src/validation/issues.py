"""Issue accumulator used while a single record is being validated.

Rules append errors and warnings here, each tagged with an IssueCategory
and carrying the points it deducts. The final score is derived from the
recorded deductions, so every lost point is traceable to one issue.
"""

from src.schemas.models import (
    CollegeRecord,
    IssueCategory,
    Severity,
    ValidationIssue,
    ValidationVerdict,
)

MAX_SCORE = 100


class IssueLog:
    """Mutable collector for one validation call. Not shared across records."""

    def __init__(self) -> None:
        self.errors: list[ValidationIssue] = []
        self.warnings: list[ValidationIssue] = []

    def error(
        self,
        category: IssueCategory,
        message: str,
        deduction: int = 0,
        label: str | None = None,
    ) -> None:
        self.errors.append(ValidationIssue(
            category=category,
            severity=Severity.ERROR,
            message=message,
            deduction=deduction,
            label=label,
        ))

    def warning(self, category: IssueCategory, message: str, deduction: int = 0) -> None:
        self.warnings.append(ValidationIssue(
            category=category,
            severity=Severity.WARNING,
            message=message,
            deduction=deduction,
        ))

    def warn_group(self, category: IssueCategory, messages: list[str], deduction: int) -> None:
        """Record several warnings that together cost ``deduction`` once.

        The first message carries the deduction; the rest carry zero.
        """
        for i, message in enumerate(messages):
            self.warning(category, message, deduction if i == 0 else 0)

    @property
    def total_deduction(self) -> int:
        return sum(i.deduction for i in self.errors) + sum(i.deduction for i in self.warnings)

    @property
    def score(self) -> int:
        return max(0, MAX_SCORE - self.total_deduction)

    def verdict(self, record: CollegeRecord) -> ValidationVerdict:
        """Freeze the collected issues into a verdict for ``record``."""
        return ValidationVerdict(
            slug=record.slug,
            college_name=record.name,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            score=self.score,
        )
