# pydantic 모델 정의
# REST 요청/응답 구조를 정의합니다.
# 응답 JSON 키는 camelCase (imageUrl, createdAt, totalItems ...) 로 나갑니다.

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class UserCreate(BaseModel):
    # 형식 검사는 services.validation 에서 한 번에 모아서 함
    email: str
    password: str
    name: str


class UserLogin(BaseModel):
    # 잘못된 이메일 형식도 401 로 처리하기 위해 str 로 받음
    email: str
    password: str


class TokenOut(CamelModel):
    token: str
    user_id: str


class SignupOut(CamelModel):
    message: str
    user_id: str


class StatusIn(BaseModel):
    status: str


class StatusOut(BaseModel):
    status: str


class MessageOut(BaseModel):
    message: str


class CreatorOut(CamelModel):
    id: int
    name: str


class PostOut(CamelModel):
    id: int
    title: str
    content: str
    image_url: str
    creator: CreatorOut
    created_at: datetime
    updated_at: datetime


class PostListOut(CamelModel):
    message: str
    posts: list[PostOut]
    total_items: int


class PostDetailOut(CamelModel):
    message: str
    post: PostOut


class PostCreatedOut(CamelModel):
    message: str
    post: PostOut
    creator: CreatorOut


class ImageStoredOut(CamelModel):
    message: str
    file_path: str | None = None
