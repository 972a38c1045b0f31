"""Reference data loading.

The known-values snapshot, exception sets, bound tables, and field lists
live in ``config/reference_data.json`` so "known good" data can be updated
without code changes. Loading happens once per process; the returned
ReferenceData is frozen.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from src.paths import REFERENCE_DATA_PATH
from src.schemas.models import ReferenceData
from src.validation.accessors import unknown_fields

logger = logging.getLogger(__name__)


class ReferenceDataError(Exception):
    """Raised when reference configuration cannot be loaded or is invalid.

    Attributes:
        path: The file that failed to load.
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Invalid reference data at {path}: {reason}")


def build_reference_data(data: dict, path: Path | None = None) -> ReferenceData:
    """Validate a decoded reference document.

    Args:
        data: Decoded JSON object.
        path: Source path, used only in error messages.

    Raises:
        ReferenceDataError: Schema violation or unknown field name.
    """
    source = path or Path("<memory>")
    try:
        reference = ReferenceData.model_validate(data)
    except ValidationError as exc:
        raise ReferenceDataError(source, str(exc)) from exc

    unknown = unknown_fields(reference.referenced_fields())
    if unknown:
        raise ReferenceDataError(source, f"unknown record fields: {', '.join(unknown)}")
    return reference


def load_reference_data(path: Path | None = None) -> ReferenceData:
    """Load and validate reference data from JSON.

    Args:
        path: Reference file. Defaults to REFERENCE_DATA_PATH.

    Raises:
        ReferenceDataError: Missing or unreadable file, invalid JSON, or
            invalid content.
    """
    path = path or REFERENCE_DATA_PATH
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        raise ReferenceDataError(path, "file not found") from exc
    except json.JSONDecodeError as exc:
        raise ReferenceDataError(path, f"not valid JSON ({exc})") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ReferenceDataError(path, f"cannot be read ({exc})") from exc

    reference = build_reference_data(data, path)
    logger.info(
        "Loaded reference data: %d known-value entries, %d international, "
        "%d free-tuition, %d special-admission",
        len(reference.known_values),
        len(reference.exception_sets.international),
        len(reference.exception_sets.free_tuition),
        len(reference.exception_sets.special_admission),
    )
    return reference
