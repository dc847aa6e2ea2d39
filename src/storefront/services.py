"""Service layer for accounts and the product catalog."""

import logging
from functools import lru_cache
from typing import List, Optional

from prometheus_client import Counter
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .database import Product, SessionLocal
from .exceptions import DuplicateUsername, InvalidCredentials, StorageError, StorefrontError
from .models.user import User
from .security import hash_password, verify_password
from .stores import ProductStore, UserStore


logger = logging.getLogger(__name__)

REGISTRATION_COUNTER = Counter(
    "user_registrations_total", "Total users registered", ["role"]
)
LOGIN_FAILURE_COUNTER = Counter(
    "login_failures_total", "Total rejected login attempts"
)
PRODUCT_COUNTER = Counter(
    "products_created_total", "Total products created"
)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def _handle_service_error(session: Session, exc: Exception) -> None:
    """Rollback the transaction and re-raise as a storefront error."""
    session.rollback()
    if isinstance(exc, StorefrontError):
        raise exc
    logger.exception("service layer error", exc_info=exc)
    if isinstance(exc, SQLAlchemyError):
        raise StorageError() from exc
    raise exc


def register_user(username: str, password: str, role: str) -> User:
    """Create a user with a salted password hash.

    Raises ``DuplicateUsername`` when the insert is rejected by the table
    constraints, whatever the role or password.
    """
    password_hash = hash_password(password)
    session: Session = SessionLocal()
    try:
        try:
            user = UserStore(session).add(username, password_hash, role)
        except IntegrityError as exc:
            raise DuplicateUsername() from exc
        REGISTRATION_COUNTER.labels(role=user.role).inc()
        logger.info("registered user id=%s role=%s", user.id, user.role)
        return user
    except Exception as exc:
        _handle_service_error(session, exc)
    finally:
        session.close()


def authenticate_user(username: str, password: str) -> User:
    """Return the user whose stored hash matches ``password``."""
    session: Session = SessionLocal()
    try:
        user = UserStore(session).get_by_username(username)
        if user is None:
            # same bcrypt cost as a real comparison
            verify_password(password, _dummy_hash())
            matched = False
        else:
            matched = verify_password(password, user.password_hash)
        if not matched:
            LOGIN_FAILURE_COUNTER.inc()
            logger.info("rejected login")
            raise InvalidCredentials()
        return user
    except Exception as exc:
        _handle_service_error(session, exc)
    finally:
        session.close()


def get_user(user_id: int) -> Optional[User]:
    session: Session = SessionLocal()
    try:
        return UserStore(session).get(user_id)
    except Exception as exc:
        _handle_service_error(session, exc)
    finally:
        session.close()


def list_products() -> List[Product]:
    """Return every product in storage order, unfiltered."""
    session: Session = SessionLocal()
    try:
        return ProductStore(session).list_all()
    except Exception as exc:
        _handle_service_error(session, exc)
    finally:
        session.close()


def create_product(
    name: str,
    description: str,
    price: float,
    image_url: Optional[str],
    merchant_id: Optional[int],
) -> Product:
    """Insert a product.

    ``merchant_id`` is stored as given. Whether it names an existing
    merchant is not checked here.
    """
    session: Session = SessionLocal()
    try:
        product = ProductStore(session).add(name, description, price, image_url, merchant_id)
        PRODUCT_COUNTER.inc()
        logger.info("created product id=%s merchant=%s", product.id, merchant_id)
        return product
    except Exception as exc:
        _handle_service_error(session, exc)
    finally:
        session.close()
