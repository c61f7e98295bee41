"""
Enum Utilities for inspection payloads

CONVENTION:
━━━━━━━━━━━
• Python: str-Enum classes in app.models.inspection
• Wire values: UPPERCASE strings ("PASS", "MEASUREMENT", ...)
• Input: case-insensitive ("measurement", "yesno", "pass" are accepted)

USAGE:
━━━━━━
    @field_validator('input_type', mode='before')
    @classmethod
    def normalize_input_type(cls, v):
        return normalize_to_uppercase(v, VALID_INPUT_TYPES)
"""

from enum import Enum
from typing import Any, Set, Type

from app.models.inspection import (
    InputType, SampleStatus, JobStatus, JobPriority
)


def enum_values(enum_class: Type[Enum]) -> list:
    """
    Get all values from an enum class.

    Examples:
        >>> enum_values(JobPriority)
        ['HIGH', 'MEDIUM', 'LOW']
    """
    return [e.value for e in enum_class]


# =============================================================================
# CASE NORMALIZATION FOR PYDANTIC SCHEMAS
# =============================================================================

def normalize_to_uppercase(value: Any, valid_values: Set[str]) -> Any:
    """
    Normalize a string value to UPPERCASE if it's a valid enum value.

    Returns the original value otherwise so Pydantic raises the
    validation error.

    Examples:
        >>> normalize_to_uppercase('yesno', {'YESNO', 'BOTH'})
        'YESNO'
        >>> normalize_to_uppercase('invalid', {'YESNO', 'BOTH'})
        'invalid'
    """
    if value is None:
        return value
    if isinstance(value, str):
        upper_v = value.upper()
        if upper_v in valid_values:
            return upper_v
    return value


# =============================================================================
# PRE-DEFINED VALID VALUE SETS
# =============================================================================

VALID_INPUT_TYPES = set(enum_values(InputType))

VALID_SAMPLE_STATUSES = set(enum_values(SampleStatus))

VALID_JOB_STATUSES = set(enum_values(JobStatus))

VALID_JOB_PRIORITIES = set(enum_values(JobPriority))
