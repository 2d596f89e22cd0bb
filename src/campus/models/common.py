"""Enumerations and column helpers shared by the academic models."""

import enum
from typing import Optional, Type, TypeVar

from sqlalchemy import Enum as SAEnum

from ..core.errors import ValidationFailed

E = TypeVar("E", bound=enum.Enum)


class Department(str, enum.Enum):
    """Academic departments, persisted by display name."""

    COMPUTER_SCIENCE = "Computer Science"
    INFORMATION_TECHNOLOGY = "Information Technology"
    ELECTRONICS_AND_COMMUNICATION = "Electronics and Communication"
    ELECTRICAL_AND_ELECTRONICS = "Electrical and Electronics"
    MECHANICAL = "Mechanical"
    CIVIL = "Civil"
    BIOTECHNOLOGY = "Biotechnology"
    AERONAUTICAL = "Aeronautical"
    AUTOMOBILE = "Automobile"
    MECHATRONICS = "Mechatronics"


class Gender(str, enum.Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class BloodGroup(str, enum.Enum):
    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"


def enum_column(enum_cls: Type[enum.Enum], name: str) -> SAEnum:
    """Build a portable enum column type that stores member values verbatim."""

    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=max(len(member.value) for member in enum_cls),
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


def coerce_enum(enum_cls: Type[E], value, field: str) -> Optional[E]:
    """Return the enum member for ``value`` or raise ``ValidationFailed``."""

    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationFailed(f"{field} must be one of: {allowed}") from exc


def check_range(value, field: str, minimum: int, maximum: Optional[int] = None):
    """Validate an integer field against inclusive bounds."""

    if value is None:
        raise ValidationFailed(f"{field} is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationFailed(f"{field} must be an integer")
    if value < minimum:
        raise ValidationFailed(f"{field} must be at least {minimum}")
    if maximum is not None and value > maximum:
        raise ValidationFailed(f"{field} cannot be more than {maximum}")
    return value


def check_length(value: Optional[str], field: str, maximum: int, required: bool = True) -> Optional[str]:
    """Trim a string field and enforce its maximum length."""

    if value is None:
        if required:
            raise ValidationFailed(f"{field} is required")
        return None
    value = value.strip()
    if required and not value:
        raise ValidationFailed(f"{field} is required")
    if len(value) > maximum:
        raise ValidationFailed(f"{field} cannot be more than {maximum} characters")
    return value
