from marketplace.models.user import User
from marketplace.models.organizer import Company, OrganizerProfile, DoctorProfile
from marketplace.models.event import Event, TicketTier

__all__ = ["User", "Company", "OrganizerProfile", "DoctorProfile", "Event", "TicketTier"]
