"""Persistence helpers for users and products.

Stores only wrap queries on an open session; they hold no business rules.
Callers own the session and its lifetime.
"""

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .database import Product
from .models.user import User


class UserStore:
    """Credential rows keyed by id and unique username."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return self.session.query(User).filter(User.username == username).first()

    def add(self, username: str, password_hash: str, role: str) -> User:
        """Insert a user row.

        Raises ``IntegrityError`` when the username is taken or the role
        violates the table constraint; the session is rolled back first.
        """
        user = User(username=username, password_hash=password_hash, role=role)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return user


class ProductStore:
    """Product rows in insertion order."""

    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[Product]:
        return self.session.query(Product).order_by(Product.id).all()

    def add(
        self,
        name: str,
        description: str,
        price: float,
        image_url: Optional[str],
        merchant_id: Optional[int],
    ) -> Product:
        product = Product(
            name=name,
            description=description,
            price=price,
            image_url=image_url,
            merchant_id=merchant_id,
        )
        self.session.add(product)
        self.session.commit()
        self.session.refresh(product)
        return product
