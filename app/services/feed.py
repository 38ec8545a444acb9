# 게시글 변경 파이프라인 (REST, GraphQL 공용)
# 생성/수정/삭제 모두 같은 순서로 진행하고, 실패하면 바로 멈춤
#   1. 로그인 확인      -> Unauthenticated
#   2. 입력값 검사      -> ValidationFailed (오류 전부)
#   3. 게시글 조회      -> NotFound   (수정/삭제)
#   4. 작성자 확인      -> Forbidden  (수정/삭제)
#   5. 이미지 교체      (수정)
#   6. 게시글 저장 후 작성자의 post_ids 저장
#   7. 구독자에게 알림  (broadcaster 가 있을 때만)
# 4번까지 통과하기 전에는 아무것도 쓰지 않고, 알림은 커밋된 변경에 대해서만 보냄.
# 게시글 저장 이후 작업(post_ids, 이미지 삭제, 알림)은 best-effort.

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

import app.db.models as models
from app import config
from app.auth.dependencies import AuthResult, require_identity
from app.db import crud
from app.db.schemas import PostOut
from app.errors import Forbidden, NotFound, Unauthenticated, ValidationFailed
from app.realtime.broadcaster import Broadcaster
from app.services.images import ImageStore
from app.services.validation import post_input_errors

logger = logging.getLogger(__name__)

# 이보다 큰 페이지 번호는 마지막으로 취급 (DB 정수 범위를 넘지 않도록)
MAX_PAGE = 2**31 - 1


@dataclass
class PostInput:
    title: str | None
    content: str | None
    image_url: str | None


def is_owner(post: models.Post, user_id: int | None) -> bool:
    return user_id is not None and post.creator_id == user_id


def post_snapshot(post: models.Post) -> dict[str, Any]:
    return PostOut.model_validate(post).model_dump(mode="json", by_alias=True)


class PostPipeline:
    def __init__(
        self,
        db: Session,
        images: ImageStore,
        broadcaster: Broadcaster | None = None,
        page_size: int | None = None,
    ):
        self.db = db
        self.images = images
        self.broadcaster = broadcaster
        self.page_size = page_size or config.POSTS_PER_PAGE

    # reads

    def list_posts(self, page: int | None = 1) -> tuple[list[models.Post], int]:
        page = min(max(page or 1, 1), MAX_PAGE)
        # count 와 목록 조회는 별도 쿼리, 둘 사이 스냅샷 보장 없음
        total = crud.count_posts(self.db)
        posts = crud.list_posts(self.db, offset=(page - 1) * self.page_size, limit=self.page_size)
        return posts, total

    def get_post(self, post_id: int) -> models.Post:
        post = crud.get_post(self.db, post_id)
        if post is None:
            raise NotFound("Post")
        return post

    # mutations

    def create_post(self, auth: AuthResult, data: PostInput) -> models.Post:
        user_id = require_identity(auth)
        self._validate(data, missing_image="No image provided.")

        user = crud.get_user(self.db, user_id)
        if user is None:
            raise Unauthenticated("Invalid user.")

        post = crud.save(
            self.db,
            models.Post(
                title=data.title.strip(),
                content=data.content.strip(),
                image_url=data.image_url,
                creator_id=user.id,
            ),
        )
        crud.push_post_ref(self.db, user, post.id)
        logger.info("Post %s created by user %s", post.id, user.id)

        self._notify("create", post_snapshot(post))
        return post

    def update_post(self, auth: AuthResult, post_id: int, data: PostInput) -> models.Post:
        user_id = require_identity(auth)
        self._validate(data, missing_image="No file picked!")

        post = self.get_post(post_id)
        if not is_owner(post, user_id):
            raise Forbidden()

        if data.image_url != post.image_url:
            self.images.delete(post.image_url)

        post.title = data.title.strip()
        post.content = data.content.strip()
        post.image_url = data.image_url
        post = crud.save(self.db, post)
        logger.info("Post %s updated by user %s", post.id, user_id)

        self._notify("update", post_snapshot(post))
        return post

    def delete_post(self, auth: AuthResult, post_id: int) -> bool:
        user_id = require_identity(auth)

        post = self.get_post(post_id)
        if not is_owner(post, user_id):
            raise Forbidden()

        image_url = post.image_url
        crud.delete(self.db, post)
        self.images.delete(image_url)

        user = crud.get_user(self.db, user_id)
        if user is not None:
            crud.pull_post_ref(self.db, user, post_id)
        logger.info("Post %s deleted by user %s", post_id, user_id)

        self._notify("delete", post_id)
        return True

    def _validate(self, data: PostInput, missing_image: str) -> None:
        errors = post_input_errors(data.title, data.content)
        if errors:
            raise ValidationFailed(errors)
        if not data.image_url:
            raise ValidationFailed([{"message": missing_image}], message=missing_image)

    def _notify(self, action: str, post: Any) -> None:
        if self.broadcaster is None:
            return
        try:
            self.broadcaster.publish({"action": action, "post": post})
        except Exception:
            logger.exception("Could not publish %s event", action)
