"""User records for identities supplied by the external login provider."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from ..errors import StoreError, ValidationError
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger(__name__)


@contextmanager
def _session(session_factory: SessionFactory, operation: str) -> Iterator[Session]:
    try:
        with session_factory() as session:
            yield session
    except SQLAlchemyError as exc:
        logger.error("User operation failed", extra={"operation": operation}, exc_info=True)
        raise StoreError(f"{operation} failed: {exc}") from exc


def _by_provider_id(session: Session, provider_id: str) -> Optional[User]:
    return session.exec(select(User).where(User.provider_id == provider_id)).first()


def get_user(user_id: int, *, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by internal id."""
    with _session(session_factory, "get_user") as session:
        user = session.get(User, user_id)
        if user:
            session.expunge(user)
        return user


def get_user_by_provider_id(provider_id: str, *, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by the identity provider's subject id."""
    with _session(session_factory, "get_user_by_provider_id") as session:
        user = _by_provider_id(session, provider_id)
        if user:
            session.expunge(user)
        return user


def ensure_user(
    *,
    provider_id: str,
    email: str,
    name: Optional[str] = None,
    avatar_url: Optional[str] = None,
    session_factory: SessionFactory,
) -> User:
    """Return the user for ``provider_id``, creating it on first login."""

    provider_id = (provider_id or "").strip()
    email = (email or "").strip()
    if not provider_id:
        raise ValidationError("Provider id is required", {"provider_id": ["This field is required."]})
    if not email:
        raise ValidationError("Email is required", {"email": ["This field is required."]})

    with _session(session_factory, "ensure_user") as session:
        existing = _by_provider_id(session, provider_id)
        if existing:
            session.expunge(existing)
            return existing

        user = User(provider_id=provider_id, email=email, name=name, avatar_url=avatar_url)
        session.add(user)
        try:
            session.commit()
        except IntegrityError:
            # A concurrent first login created the row; return that one.
            session.rollback()
            user = _by_provider_id(session, provider_id)
            if user is None:
                raise
            session.expunge(user)
            return user
        session.refresh(user)
        session.expunge(user)

    logger.info("User created", extra={"user_id": user.id})
    return user


__all__ = ["ensure_user", "get_user", "get_user_by_provider_id"]
