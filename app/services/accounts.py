# 회원가입, 로그인, 상태 메시지

import logging

from sqlalchemy.orm import Session

import app.db.models as models
from app.auth.auth import issue_token
from app.auth.dependencies import AuthResult, require_identity
from app.db import crud
from app.errors import NotFound, Unauthenticated, ValidationFailed
from app.services.validation import signup_errors

logger = logging.getLogger(__name__)


def signup(db: Session, email: str, password: str, name: str) -> models.User:
    errors = signup_errors(email, password, name)
    if errors:
        raise ValidationFailed(errors, message="Invalid input.")

    email = email.strip().lower()
    if crud.get_user_by_email(db, email) is not None:
        raise ValidationFailed([{"message": "User exists already."}], message="User exists already.")

    user = crud.create_user(db, email=email, password=password, name=name.strip())
    logger.info("User %s signed up", user.id)
    return user


def login(db: Session, email: str, password: str) -> tuple[str, models.User]:
    user = crud.get_user_by_email(db, (email or "").strip().lower())
    if user is None:
        raise Unauthenticated("User not found.")
    if not crud.verify_password(password or "", user.hashed_password):
        raise Unauthenticated("Password is incorrect.")
    return issue_token(user), user


def current_user(db: Session, auth: AuthResult) -> models.User:
    user = crud.get_user(db, require_identity(auth))
    if user is None:
        raise NotFound("User")
    return user


def update_status(db: Session, auth: AuthResult, status: str) -> models.User:
    user = current_user(db, auth)
    user.status = status
    return crud.save(db, user)
