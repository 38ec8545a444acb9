from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.db.schemas import SignupOut, TokenOut, UserCreate, UserLogin
from app.services import accounts

router = APIRouter(prefix="/auth", tags=["auth"])


@router.put("/signup", status_code=201, response_model=SignupOut)
def signup(user: UserCreate, db: Session = Depends(get_db)):
    new_user = accounts.signup(db, email=user.email, password=user.password, name=user.name)
    return SignupOut(message="User created!", user_id=str(new_user.id))


@router.post("/login", response_model=TokenOut)
def login(user: UserLogin, db: Session = Depends(get_db)):
    token, db_user = accounts.login(db, user.email, user.password)
    return TokenOut(token=token, user_id=str(db_user.id))
