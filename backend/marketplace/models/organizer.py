"""
Organizer and doctor profiles.

Key design decisions:
- Profiles hang off a User 1:1 (unique user_id), created by the role-specific signup
- Company is its own table so several organizers of one business can share it
- Verification flags are flipped by staff outside the API; nothing here sets them
"""

from sqlalchemy import Column, Integer, String, Boolean, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from marketplace.db.base import Base, TimestampMixin
from marketplace.domain import BusinessType, sql_in


class Company(Base, TimestampMixin):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    registration_number = Column(String(100), nullable=True)
    business_type = Column(String(30), nullable=True)
    street = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(30), nullable=True)
    website = Column(String(255), nullable=True)
    logo = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    verified = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint(
            f"business_type IS NULL OR business_type IN ({sql_in(BusinessType)})",
            name="check_company_business_type",
        ),
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name}, verified={self.verified})>"


class OrganizerProfile(Base, TimestampMixin):
    __tablename__ = "organizer_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    position = Column(String(100), nullable=True)
    phone_number = Column(String(30), nullable=True)
    bio = Column(Text, nullable=True)
    profile_picture = Column(String(500), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="organizer_profile")
    company = relationship("Company", lazy="selectin")

    def __repr__(self) -> str:
        return f"<OrganizerProfile(id={self.id}, user={self.user_id}, company={self.company_id})>"


class DoctorProfile(Base, TimestampMixin):
    __tablename__ = "doctor_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    registration_number = Column(String(50), nullable=False, unique=True, index=True)
    specialization = Column(String(150), nullable=True)
    qualification = Column(String(150), nullable=True)
    hospital = Column(String(255), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="doctor_profile")

    def __repr__(self) -> str:
        return f"<DoctorProfile(id={self.id}, reg={self.registration_number})>"
