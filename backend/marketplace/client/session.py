"""
Session store: the single owner of the client's credential.

Two storage tiers hold ``token`` and the serialized ``user``:

  durable    survives restarts; chosen by "remember me"
  ephemeral  lives for this process only

Only login/logout/invalidate mutate the store. Readers (the authorization
interceptor, the router) receive the store by injection; nothing reads a
global.
"""

from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from marketplace.client.storage import Storage
from marketplace.core.logging import get_logger
from marketplace.domain import Role

logger = get_logger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionUser(BaseModel):
    """The user record returned by the auth endpoints. Unknown fields are kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    id: Union[int, str]
    name: str
    email: str
    role: Role


@dataclass(frozen=True)
class Session:
    token: str
    user: SessionUser
    durable: bool

    @property
    def role(self) -> Role:
        return self.user.role


class SessionStore:
    def __init__(self, durable: Storage, ephemeral: Storage):
        self._durable = durable
        self._ephemeral = ephemeral
        self._session: Optional[Session] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def token(self) -> Optional[str]:
        return self._session.token if self._session else None

    @property
    def user(self) -> Optional[SessionUser]:
        return self._session.user if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def hydrate(self) -> Optional[Session]:
        """
        Restore a remembered session from the durable tier. No network I/O:
        the token is trusted until a request comes back 401.
        """
        token = self._durable.get(TOKEN_KEY)
        raw_user = self._durable.get(USER_KEY)
        if not token or not raw_user:
            self._session = None
            return None

        try:
            user = SessionUser.model_validate_json(raw_user)
        except ValidationError as e:
            logger.warning("session_hydrate_failed", errors=e.error_count())
            self._clear_tier(self._durable)
            self._session = None
            return None

        self._session = Session(token=token, user=user, durable=True)
        logger.info("session_hydrated", user_id=user.id, role=user.role.value)
        return self._session

    def login(self, token: str, user: Union[SessionUser, dict], remember: bool = False) -> Session:
        if not isinstance(user, SessionUser):
            user = SessionUser.model_validate(user)

        target, other = (self._durable, self._ephemeral) if remember else (self._ephemeral, self._durable)
        self._clear_tier(other)
        target.set(TOKEN_KEY, token)
        target.set(USER_KEY, user.model_dump_json(by_alias=True))

        self._session = Session(token=token, user=user, durable=remember)
        logger.info("session_started", user_id=user.id, role=user.role.value, remember=remember)
        return self._session

    def logout(self) -> None:
        self._clear_all()
        logger.info("session_ended")

    def invalidate(self) -> None:
        """Drop the credential after the server rejected it (401)."""
        was_authenticated = self._session is not None
        self._clear_all()
        if was_authenticated:
            logger.warning("session_invalidated")

    def _clear_all(self) -> None:
        self._clear_tier(self._durable)
        self._clear_tier(self._ephemeral)
        self._session = None

    @staticmethod
    def _clear_tier(storage: Storage) -> None:
        storage.remove(TOKEN_KEY)
        storage.remove(USER_KEY)
