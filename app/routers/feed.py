from fastapi import APIRouter, Depends, Form, Query, Request
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.auth.dependencies import AuthResult, get_auth
from app.db.database import get_db
from app.db.schemas import (
    CreatorOut,
    MessageOut,
    PostCreatedOut,
    PostDetailOut,
    PostListOut,
    PostOut,
    StatusIn,
    StatusOut,
)
from app.services import accounts
from app.services.feed import PostInput, PostPipeline

router = APIRouter(
    prefix="/feed",
    tags=["feed"],
    redirect_slashes=False
)


def get_pipeline(request: Request, db: Session = Depends(get_db)) -> PostPipeline:
    # REST 경로에서만 broadcaster 를 넘겨서 실시간 알림을 보냄
    return PostPipeline(db, request.app.state.images, request.app.state.broadcaster)


# multipart 의 image 필드는 새 파일이거나, 기존 이미지 경로 문자열일 수 있음
async def image_field(request: Request) -> StarletteUploadFile | str | None:
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        return None
    form = await request.form()
    value = form.get("image")
    if isinstance(value, StarletteUploadFile):
        return value
    return value or None


# 숫자가 아닌 page 는 첫 페이지로 처리
def _parse_page(value: str | None) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 1


# (이미지 경로, 이번 요청에서 새로 저장했는지 여부)
def _store_image(pipeline: PostPipeline, image) -> tuple[str | None, bool]:
    if isinstance(image, StarletteUploadFile):
        stored = pipeline.images.store(image)
        return stored, stored is not None
    return image, False


@router.get("/posts", response_model=PostListOut)
def get_posts(
    page: str | None = Query(None),
    pipeline: PostPipeline = Depends(get_pipeline)
):
    posts, total = pipeline.list_posts(_parse_page(page))
    return PostListOut(
        message="Fetched posts successfully!",
        posts=[PostOut.model_validate(p) for p in posts],
        total_items=total,
    )


@router.post("/post", status_code=201, response_model=PostCreatedOut)
def create_post(
    title: str = Form(""),
    content: str = Form(""),
    image=Depends(image_field),
    auth: AuthResult = Depends(get_auth),
    pipeline: PostPipeline = Depends(get_pipeline)
):
    # 파일이 아닌 문자열은 생성 시에 받지 않음
    image_url, written = _store_image(pipeline, image if isinstance(image, StarletteUploadFile) else None)
    try:
        post = pipeline.create_post(auth, PostInput(title=title, content=content, image_url=image_url))
    except Exception:
        if written:
            pipeline.images.delete(image_url)
        raise

    return PostCreatedOut(
        message="Post created successfully!",
        post=PostOut.model_validate(post),
        creator=CreatorOut.model_validate(post.creator),
    )


@router.get("/post/{post_id}", response_model=PostDetailOut)
def get_post(post_id: int, pipeline: PostPipeline = Depends(get_pipeline)):
    post = pipeline.get_post(post_id)
    return PostDetailOut(message="Post fetched successfully!", post=PostOut.model_validate(post))


@router.put("/post/{post_id}", response_model=PostDetailOut)
def update_post(
    post_id: int,
    title: str = Form(""),
    content: str = Form(""),
    image=Depends(image_field),
    auth: AuthResult = Depends(get_auth),
    pipeline: PostPipeline = Depends(get_pipeline)
):
    image_url, written = _store_image(pipeline, image)
    try:
        post = pipeline.update_post(auth, post_id, PostInput(title=title, content=content, image_url=image_url))
    except Exception:
        if written:
            pipeline.images.delete(image_url)
        raise

    return PostDetailOut(message="Post updated successfully!", post=PostOut.model_validate(post))


@router.delete("/post/{post_id}", response_model=MessageOut)
def delete_post(
    post_id: int,
    auth: AuthResult = Depends(get_auth),
    pipeline: PostPipeline = Depends(get_pipeline)
):
    pipeline.delete_post(auth, post_id)
    return {"message": "Post deleted successfully!"}


@router.get("/status", response_model=StatusOut)
def get_status(auth: AuthResult = Depends(get_auth), db: Session = Depends(get_db)):
    user = accounts.current_user(db, auth)
    return {"status": user.status}


@router.put("/status", response_model=MessageOut)
def edit_status(
    body: StatusIn,
    auth: AuthResult = Depends(get_auth),
    db: Session = Depends(get_db)
):
    accounts.update_status(db, auth, body.status)
    return {"message": "User Status Updated"}
