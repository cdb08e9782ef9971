"""
Sign-in and signup flows.

Each flow validates locally first (no request is sent for an incomplete
form), then calls the API and, on success, hands token and user to the
session store. Failures raise FormRejected carrying per-field errors and
always emit an error notification.
"""

import re
from typing import Optional

from marketplace.client.errors import (
    AuthenticationError,
    BusinessRuleError,
    ClientError,
    RateLimitedError,
)
from marketplace.client.forms import FormErrors, FormRejected, errors_from_failure
from marketplace.client.notify import LoggingNotifier, Notifier
from marketplace.client.session import Session, SessionUser
from marketplace.client.transport import ApiClient
from marketplace.core.logging import get_logger
from marketplace.domain import Role, exhaustive

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8

INVALID_CREDENTIALS = "Invalid email or password"
TOO_MANY_ATTEMPTS = "Too many login attempts. Please try again later."
EMAIL_TAKEN = "This email is already registered"

# Shown when a portal's sign-in is used with an account of another role
ROLE_DENIED = exhaustive(
    {
        Role.USER: "This account is not registered as a user",
        Role.ORGANIZER: "This account is not registered as an organizer",
        Role.ADMIN: "Access denied. Only admin users can login here.",
        Role.DOCTOR: "This account is not registered as a doctor",
        Role.PROPERTY_OWNER: "This account is not registered as a property owner",
    },
    Role,
)


def _check_email(errors: FormErrors, email: str) -> None:
    if not email.strip():
        errors.fields["email"] = "Email is required"
    elif not EMAIL_PATTERN.match(email.strip()):
        errors.fields["email"] = "Please enter a valid email address"


def _check_new_password(errors: FormErrors, password: str, confirm_password: Optional[str]) -> None:
    if not password:
        errors.fields["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors.fields["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if confirm_password is not None and confirm_password != password:
        errors.fields["confirmPassword"] = "Passwords do not match"


def _already_exists(exc: ClientError) -> bool:
    message = exc.message.lower()
    return "already exists" in message or "already registered" in message


class AuthFlow:
    def __init__(self, api: ApiClient, notifier: Optional[Notifier] = None):
        self.api = api
        self.store = api.store
        self.notifier = notifier or LoggingNotifier()

    def _reject(self, errors: FormErrors, toast: str, cause: Optional[Exception] = None) -> FormRejected:
        self.notifier.error(toast)
        rejected = FormRejected(errors)
        if cause is not None:
            rejected.__cause__ = cause
        return rejected

    async def sign_in(
        self,
        email: str,
        password: str,
        remember: bool = False,
        required_role: Optional[Role] = None,
    ) -> Session:
        """
        Sign in and store the session in the tier picked by `remember`.
        With `required_role`, an account of another role is refused and
        nothing is stored.
        """
        errors = FormErrors()
        if not email.strip() or not password:
            errors.general = "Please provide both email and password"
            raise self._reject(errors, errors.general)

        try:
            body = await self.api.post("/auth/signin", json={"email": email.strip(), "password": password})
        except AuthenticationError as exc:
            raise self._reject(FormErrors({"password": INVALID_CREDENTIALS}), INVALID_CREDENTIALS, exc)
        except RateLimitedError as exc:
            raise self._reject(FormErrors(general=TOO_MANY_ATTEMPTS), TOO_MANY_ATTEMPTS, exc)
        except ClientError as exc:
            errors = errors_from_failure(
                exc, ("email", "password"), fallback="Authentication failed. Please try again."
            )
            raise self._reject(errors, errors.general or "Authentication failed. Please try again.", exc)

        user = SessionUser.model_validate(body["user"])
        if required_role is not None and user.role != required_role:
            message = ROLE_DENIED[required_role]
            logger.info("signin_role_mismatch", user_id=user.id, role=user.role.value, required=required_role.value)
            raise self._reject(FormErrors(general=message), message)

        session = self.store.login(body["token"], user, remember=remember)
        self.notifier.success("Successfully logged in!")
        return session

    async def sign_up(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: Optional[str] = None,
        role: Role = Role.USER,
    ) -> Session:
        errors = FormErrors()
        if not name.strip():
            errors.fields["name"] = "Name is required"
        _check_email(errors, email)
        _check_new_password(errors, password, confirm_password)
        if errors:
            raise self._reject(errors, "Please correct the errors in the form")

        payload = {"name": name.strip(), "email": email.strip(), "password": password, "role": role.value}
        body = await self._register("/auth/signup", payload, ("name", "email", "password", "role"))
        return self._start_new_account(body)

    async def organizer_signup(
        self,
        name: str,
        email: str,
        password: str,
        company: str,
        confirm_password: Optional[str] = None,
        phone: Optional[str] = None,
        description: Optional[str] = None,
        website: Optional[str] = None,
    ) -> Session:
        errors = FormErrors()
        if not name.strip():
            errors.fields["name"] = "Name is required"
        _check_email(errors, email)
        if not company.strip():
            errors.fields["company"] = "Company name is required"
        _check_new_password(errors, password, confirm_password)
        if errors:
            raise self._reject(errors, "Please correct the errors in the form")

        payload = {
            "name": name.strip(),
            "email": email.strip(),
            "password": password,
            "company": company.strip(),
            "description": description,
            "website": website,
        }
        if phone and phone.strip():
            payload["phone"] = phone.strip()

        body = await self._register(
            "/auth/organizer/signup", payload, ("name", "email", "phone", "company", "password")
        )
        return self._start_new_account(body)

    async def doctor_signup(
        self,
        reg_number: str,
        email: str,
        password: str,
        name: Optional[str] = None,
        specialization: Optional[str] = None,
        qualification: Optional[str] = None,
        hospital: Optional[str] = None,
    ) -> Session:
        errors = FormErrors()
        if not reg_number.strip():
            errors.fields["regNumber"] = "Registration number is required"
        _check_email(errors, email)
        _check_new_password(errors, password, None)
        if errors:
            raise self._reject(errors, "Please correct the errors in the form")

        payload = {
            "name": name or f"Dr. {reg_number.split()[-1]}",
            "email": email.strip(),
            "password": password,
            "regNumber": reg_number.strip(),
            "specialization": specialization,
            "qualification": qualification,
            "hospital": hospital,
        }
        body = await self._register("/auth/doctor/signup", payload, ("email", "password", "regNumber"))
        return self._start_new_account(body)

    def logout(self) -> None:
        self.store.logout()
        self.notifier.success("You have been logged out")

    async def _register(self, url: str, payload: dict, known_fields: tuple[str, ...]) -> dict:
        try:
            return await self.api.post(url, json=payload)
        except BusinessRuleError as exc:
            errors = FormErrors()
            message = exc.message.lower()
            if _already_exists(exc) and "registration" in message:
                errors.fields["regNumber"] = "This registration number is already registered"
            elif _already_exists(exc):
                errors.fields["email"] = EMAIL_TAKEN
            else:
                errors.general = exc.message
            raise self._reject(errors, next(iter(errors.fields.values()), exc.message), exc)
        except ClientError as exc:
            errors = errors_from_failure(exc, known_fields, fallback="Registration failed. Please try again.")
            toast = "Please correct the errors in the form" if errors.fields else errors.general
            raise self._reject(errors, toast, exc)

    def _start_new_account(self, body: dict) -> Session:
        # New accounts are not remembered across restarts
        session = self.store.login(body["token"], body["user"], remember=False)
        self.notifier.success("Account created successfully!")
        return session
