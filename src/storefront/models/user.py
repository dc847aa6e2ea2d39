import enum

from sqlalchemy import CheckConstraint, Column, Integer, String

from ..database import Base


class Role(str, enum.Enum):
    """The two fixed account roles."""

    MERCHANT = "merchant"
    CUSTOMER = "customer"


class User(Base):
    """SQLAlchemy model for application users."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('merchant', 'customer')", name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False)
