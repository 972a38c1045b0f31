"""Synthetic college rows and reference data shared by the test modules."""

import json

from src.schemas.models import CollegeRecord, ReferenceData

PERFECT_DESCRIPTION = (
    "William & Mary is a public research university in Williamsburg, Virginia, "
    "founded in 1693 and known for its liberal arts tradition."
)

ADMISSION_FACTORS_OK = {
    "Academic GPA": "Very Important",
    "Rigor of secondary school record": "Very Important",
    "Standardized test scores": "Considered",
    "Application essay": "Important",
    "Recommendation(s)": "Important",
    "Extracurricular activities": "Important",
}


def perfect_row(**overrides) -> dict:
    """Wire-named row that scores 100 against config/reference_data.json.

    William & Mary has a known-values entry (33%, Public), sits in the
    15-35% "Very Selective" band, and is below the elite cutoff, so no
    early-round fields are expected.
    """
    row = {
        "id": "c-0001",
        "name": "William & Mary",
        "slug": "william-and-mary",
        "location": "Williamsburg, VA",
        "setting": "Suburban",
        "institutionalSector": "Public",
        "undergraduateEnrollment": 6800,
        "studentsAdmittedPercent": 33.0,
        "costOfAttendanceInState": 38000,
        "costOfAttendanceOutOfState": 65000,
        "studentFacultyRatio": "12:1",
        "admissionsSelectivity": "Very Selective",
        "testPolicy": "Test Optional",
        "retentionRate": 94,
        "graduationRate4yr": 86,
        "medianEarnings10yr": 72000,
        "totalApplicants": 17000,
        "totalAdmitted": 5610,
        "satScores": json.dumps({
            "readingWriting": {"min": 660, "max": 740},
            "math": {"min": 640, "max": 750},
            "total": {"min": 1320, "max": 1490},
            "percentSubmitted": 45,
        }),
        "actScores": json.dumps({"composite": {"min": 30, "max": 34}}),
        "popularMajors": json.dumps(["Business", "Biology", "Economics", "Psychology"]),
        "admissionConsiderations": json.dumps(ADMISSION_FACTORS_OK),
        "description": PERFECT_DESCRIPTION,
        "website": "https://www.wm.edu",
        "rdDeadline": "January 5",
        "fafsaRequired": True,
        "cssProfileRequired": False,
        "averageNetPrice": 21000,
        "raceEthnicity": json.dumps({"White": 55, "Asian": 9, "Hispanic": 10, "Black": 7}),
        "genderDistribution": json.dumps({"women": 58, "men": 42}),
    }
    row.update(overrides)
    return row


def perfect_record(**overrides) -> CollegeRecord:
    return CollegeRecord.model_validate(perfect_row(**overrides))


def unlisted_record(**overrides) -> CollegeRecord:
    """A perfect record under a slug with no known-values entry."""
    fields = {"slug": "sample-state-university", "name": "Sample State University"}
    fields.update(overrides)
    return perfect_record(**fields)


def minimal_reference(**overrides) -> ReferenceData:
    """Small synthetic reference data with one entry per exception set."""
    data = {
        "known_values": {
            "known-college": {"studentsAdmittedPercent": 10.0, "institutionalSector": "Private",
                              "testPolicy": "Test Required"},
        },
        "exception_sets": {
            "international": ["overseas-university"],
            "free_tuition": ["service-academy"],
            "special_admission": ["service-academy"],
        },
        "numeric_ranges": [
            {"field": "studentsAdmittedPercent", "label": "Acceptance rate",
             "min": 1, "max": 100, "unit": "%", "deduction": 10},
        ],
        "required_fields": ["name", "slug", "website"],
        "important_fields": ["setting", "satScores"],
        "elite_fields": {
            "early_decision": ["earlyDecisionApplied"],
            "early_action": ["earlyActionApplied"],
            "always": ["primaryColor"],
        },
    }
    data.update(overrides)
    return ReferenceData.model_validate(data)
