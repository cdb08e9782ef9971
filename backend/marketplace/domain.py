"""
Closed vocabularies shared by the API server and the client.

Every value that crosses the wire as a string enum is declared here once,
so authorization checks and validation can handle each member explicitly.
"""

from enum import Enum


class Role(str, Enum):
    USER = "user"
    ORGANIZER = "organizer"
    ADMIN = "admin"
    DOCTOR = "doctor"
    PROPERTY_OWNER = "property-owner"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Terminal states an admin review may move a pending event into
REVIEW_OUTCOMES = (ApprovalStatus.APPROVED, ApprovalStatus.REJECTED)


class EventCategory(str, Enum):
    CULTURAL = "cultural"
    MUSIC = "music"
    SPORTS = "sports"
    CULINARY = "culinary"
    ADVENTURE = "adventure"
    BUSINESS = "business"
    OTHER = "other"


class BusinessType(str, Enum):
    SOLE_PROPRIETORSHIP = "sole_proprietorship"
    PARTNERSHIP = "partnership"
    PRIVATE_LIMITED = "private_limited"
    PUBLIC_LIMITED = "public_limited"


# Roles anyone may pick on the generic signup form.
# Organizers and doctors register through their own flows, admins are seeded.
SELF_SERVICE_ROLES = (Role.USER, Role.PROPERTY_OWNER)


def exhaustive(mapping: dict, enum_cls: type[Enum]) -> dict:
    """Return `mapping` unchanged, failing at import time if a member is missing."""
    missing = [member.value for member in enum_cls if member not in mapping]
    if missing:
        raise RuntimeError(f"{enum_cls.__name__} mapping lacks: {', '.join(missing)}")
    return mapping


def sql_in(enum_cls: type[Enum]) -> str:
    """Render an enum as a SQL IN list for CHECK constraints."""
    return ", ".join(f"'{member.value}'" for member in enum_cls)
