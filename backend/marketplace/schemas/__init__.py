from marketplace.schemas.common import ErrorResponse, MessageResponse
from marketplace.schemas.user import (
    SignInRequest, SignUpRequest, OrganizerSignUpRequest, DoctorSignUpRequest,
    UserResponse, AuthResponse,
)
from marketplace.schemas.event import EventCreate, EventUpdate, EventResponse, EventListResponse
from marketplace.schemas.admin import ReviewRequest, ReviewResponse, DashboardResponse

__all__ = [
    "ErrorResponse", "MessageResponse",
    "SignInRequest", "SignUpRequest", "OrganizerSignUpRequest", "DoctorSignUpRequest",
    "UserResponse", "AuthResponse",
    "EventCreate", "EventUpdate", "EventResponse", "EventListResponse",
    "ReviewRequest", "ReviewResponse", "DashboardResponse",
]
