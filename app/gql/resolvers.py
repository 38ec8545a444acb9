# GraphQL 루트 리졸버
# graphql-core 의 기본 resolver 가 root_value 딕셔너리에서 (info, **args) 함수를 찾아 호출함.
# context 는 db, auth, images 를 담은 딕셔너리.
# createUser, login 외에는 전부 토큰 필요. 변경은 REST 와 같은 파이프라인을 타지만 WebSocket 알림은 보내지 않음.

from app.auth.dependencies import require_identity
from app.db import crud
from app.errors import NotFound
from app.services import accounts
from app.services.feed import PostInput, PostPipeline


def _iso(value) -> str:
    return value.isoformat()


def _parse_id(value, entity: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise NotFound(entity)


def serialize_user(user, db=None) -> dict:
    data = {
        "_id": str(user.id),
        "name": user.name,
        "email": user.email,
        "status": user.status,
    }
    # posts 는 쿼리에서 요청했을 때만 조회 (default resolver 가 callable 을 호출함)
    if db is not None:
        data["posts"] = lambda info: [serialize_post(p) for p in crud.posts_by_ids(db, user.post_ids or [])]
    else:
        data["posts"] = []
    return data


def serialize_post(post) -> dict:
    return {
        "_id": str(post.id),
        "title": post.title,
        "content": post.content,
        "imageUrl": post.image_url,
        "creator": serialize_user(post.creator),
        "createdAt": _iso(post.created_at),
        "updatedAt": _iso(post.updated_at),
    }


def _pipeline(info) -> PostPipeline:
    ctx = info.context
    return PostPipeline(ctx["db"], ctx["images"])


def _post_input(data: dict | None) -> PostInput:
    data = data or {}
    image_url = data.get("imageUrl")
    # 프론트에서 이미지 없이 보낼 때 "undefined" 문자열이 오는 경우가 있음
    if image_url == "undefined":
        image_url = None
    return PostInput(title=data.get("title"), content=data.get("content"), image_url=image_url)


def create_user(info, userInput=None):
    data = userInput or {}
    user = accounts.signup(info.context["db"], data.get("email"), data.get("password"), data.get("name"))
    return serialize_user(user)


def login(info, email, password):
    token, user = accounts.login(info.context["db"], email, password)
    return {"token": token, "userId": str(user.id)}


def create_post(info, postInput=None):
    post = _pipeline(info).create_post(info.context["auth"], _post_input(postInput))
    return serialize_post(post)


def update_post(info, id, postInput=None):
    require_identity(info.context["auth"])
    pipeline = _pipeline(info)
    data = _post_input(postInput)
    post_id = _parse_id(id, "Post")
    if data.image_url is None:
        # imageUrl 이 없으면 기존 이미지를 유지
        existing = crud.get_post(pipeline.db, post_id)
        if existing is not None:
            data.image_url = existing.image_url
    post = pipeline.update_post(info.context["auth"], post_id, data)
    return serialize_post(post)


def delete_post(info, id):
    return _pipeline(info).delete_post(info.context["auth"], _parse_id(id, "Post"))


def get_posts(info, page=None):
    pipeline = _pipeline(info)
    require_identity(info.context["auth"])
    posts, total = pipeline.list_posts(page or 1)
    return {"posts": [serialize_post(p) for p in posts], "totalPosts": total}


def get_post(info, id):
    require_identity(info.context["auth"])
    return serialize_post(_pipeline(info).get_post(_parse_id(id, "Post")))


def user(info):
    db = info.context["db"]
    return serialize_user(accounts.current_user(db, info.context["auth"]), db)


def update_status(info, status):
    db = info.context["db"]
    return serialize_user(accounts.update_status(db, info.context["auth"], status), db)


root_value = {
    "createUser": create_user,
    "login": login,
    "createPost": create_post,
    "updatePost": update_post,
    "deletePost": delete_post,
    "getPosts": get_posts,
    "getPost": get_post,
    "user": user,
    "updateStatus": update_status,
}
