"""
User model. The role column is a closed set and never changes after signup.
"""

from sqlalchemy import Column, Integer, String, Boolean, CheckConstraint
from sqlalchemy.orm import relationship

from marketplace.db.base import Base, TimestampMixin
from marketplace.domain import Role, sql_in


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.USER.value)
    phone = Column(String(30), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    organizer_profile = relationship(
        "OrganizerProfile", back_populates="user", uselist=False, lazy="selectin"
    )
    doctor_profile = relationship(
        "DoctorProfile", back_populates="user", uselist=False, lazy="selectin"
    )

    __table_args__ = (
        CheckConstraint(f"role IN ({sql_in(Role)})", name="check_user_role"),
    )

    @property
    def role_enum(self) -> Role:
        return Role(self.role)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
