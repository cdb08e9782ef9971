"""
Event model with approval workflow state and ticket tiers.

Key design decisions:
- `approval_status` is the workflow state; `published` is the organizer's
  draft/published toggle and is independent of it
- Catalog visibility is derived (approved AND published), never stored
- Review transitions are conditional UPDATEs on approval_status = 'pending',
  so concurrent reviewers cannot both win
- Composite index (approval_status, created_at) serves the pending queue
- Ticket `sold` is display-only; the CHECK keeps it within quantity
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from marketplace.db.base import Base, TimestampMixin
from marketplace.domain import ApprovalStatus, EventCategory, sql_in


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)
    location = Column(String(255), nullable=False)
    category = Column(String(20), nullable=False)
    images = Column(JSON, nullable=False, default=list)
    published = Column(Boolean, nullable=False, default=True)

    approval_status = Column(String(20), nullable=False, default=ApprovalStatus.PENDING.value)
    admin_feedback = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    organizer = relationship("User", foreign_keys=[organizer_id], lazy="selectin")
    tickets = relationship(
        "TicketTier",
        back_populates="event",
        order_by="TicketTier.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(f"category IN ({sql_in(EventCategory)})", name="check_event_category"),
        CheckConstraint(
            f"approval_status IN ({sql_in(ApprovalStatus)})", name="check_event_approval_status"
        ),
        Index("ix_events_approval_created", "approval_status", "created_at"),
        Index("ix_events_date", "date"),
    )

    @property
    def is_listed(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED.value and bool(self.published)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, status={self.approval_status})>"


class TicketTier(Base):
    __tablename__ = "ticket_tiers"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    sold = Column(Integer, nullable=False, default=0)

    event = relationship("Event", back_populates="tickets")

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_ticket_price_non_negative"),
        CheckConstraint("quantity >= 1", name="check_ticket_quantity_positive"),
        CheckConstraint("sold >= 0", name="check_ticket_sold_non_negative"),
        CheckConstraint("sold <= quantity", name="check_ticket_sold_lte_quantity"),
    )

    def __repr__(self) -> str:
        return f"<TicketTier(id={self.id}, name={self.name}, sold={self.sold}/{self.quantity})>"
