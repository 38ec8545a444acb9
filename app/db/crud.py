# DB 조회/저장 함수 모음
# 라우터와 서비스는 여기 있는 함수로만 users / posts 테이블을 건드립니다.

import bcrypt
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

import app.db.models as models
from app.services.validation import MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    password = plain_password.encode("utf-8")
    # bcrypt 는 72바이트를 넘는 비밀번호를 거부함. 그런 비밀번호로는 가입할 수 없으므로 불일치로 처리
    if len(password) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password, hashed_password.encode("utf-8"))


def create_user(db: Session, email: str, password: str, name: str) -> models.User:
    user = models.User(email=email, hashed_password=hash_password(password), name=name, post_ids=[])
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: int) -> models.User | None:
    return db.get(models.User, user_id)


def get_user_by_email(db: Session, email: str) -> models.User | None:
    return db.query(models.User).filter(models.User.email == email).first()


def get_post(db: Session, post_id: int) -> models.Post | None:
    return (
        db.query(models.Post)
        .options(joinedload(models.Post.creator))
        .filter(models.Post.id == post_id)
        .first()
    )


def count_posts(db: Session) -> int:
    return db.query(func.count(models.Post.id)).scalar()


def list_posts(db: Session, offset: int, limit: int) -> list[models.Post]:
    return (
        db.query(models.Post)
        .options(joinedload(models.Post.creator))
        .order_by(models.Post.created_at.desc(), models.Post.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def posts_by_ids(db: Session, post_ids: list[int]) -> list[models.Post]:
    if not post_ids:
        return []
    return (
        db.query(models.Post)
        .options(joinedload(models.Post.creator))
        .filter(models.Post.id.in_(post_ids))
        .order_by(models.Post.created_at.desc(), models.Post.id.desc())
        .all()
    )


def save(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete(db: Session, obj) -> None:
    db.delete(obj)
    db.commit()


# JSON 컬럼은 제자리 변경을 감지하지 못하므로 항상 새 리스트를 할당함
def push_post_ref(db: Session, user: models.User, post_id: int) -> models.User:
    if post_id not in (user.post_ids or []):
        user.post_ids = [*(user.post_ids or []), post_id]
    return save(db, user)


def pull_post_ref(db: Session, user: models.User, post_id: int) -> models.User:
    user.post_ids = [pid for pid in (user.post_ids or []) if pid != post_id]
    return save(db, user)
