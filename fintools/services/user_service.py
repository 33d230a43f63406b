from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
from fintools.common.exceptions import ForbiddenError, NotFoundError
from fintools.models.user import User, UserRole
from fintools.core.security import get_password_hash, verify_password
from fintools.logger_config import logger


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Get user by database ID."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get user by email."""
    return db.query(User).filter(User.email == email).first()


def get_user_by_user_id(db: Session, user_id: str) -> Optional[User]:
    """Get user by user_id (e.g., 'FND-ABC12345')."""
    return db.query(User).filter(User.user_id == user_id).first()


def create_user(
    db: Session,
    email: str,
    password: str,
    name: str,
    role: UserRole = UserRole.founder,
    fund_contribution: Decimal = Decimal("0"),
) -> User:
    """Create a new user."""
    if get_user_by_email(db, email):
        raise ValueError("User already exists")

    user_id = User.generate_user_id(role)
    while get_user_by_user_id(db, user_id):
        user_id = User.generate_user_id(role)

    user = User(
        user_id=user_id,
        email=email,
        password_hash=get_password_hash(password),
        name=name,
        role=role,
        fund_contribution=fund_contribution,
    )
    db.add(user)

    try:
        db.commit()
        db.refresh(user)
        return user
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error creating user: {str(e)}")
        raise ValueError("Failed to create user. User ID or email may already exist.")


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


def update_fund_contribution(db: Session, actor: User, user_id: int, amount: Decimal) -> User:
    """Set a user's contribution; admins may change anyone's, others only their own."""
    if actor.role != UserRole.admin and actor.id != user_id:
        raise ForbiddenError("Not authorized to update other users' contributions")

    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    user.fund_contribution = amount
    db.commit()
    db.refresh(user)
    logger.info(f"Fund contribution of user {user.user_id} set to {amount} by {actor.email}")
    return user
