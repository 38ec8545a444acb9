from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile

from app.auth.dependencies import AuthResult, get_auth, require_identity
from app.db.schemas import ImageStoredOut

router = APIRouter(tags=["images"])


# GraphQL 클라이언트용 업로드 엔드포인트: 파일을 저장하고 경로만 돌려줌
# 이 경로를 createPost / updatePost 의 imageUrl 로 넘기면 됨
@router.put("/post-image", status_code=201, response_model=ImageStoredOut)
def upload_post_image(
    request: Request,
    response: Response,
    image: UploadFile | None = File(None),
    old_path: str | None = Form(None, alias="oldPath"),
    auth: AuthResult = Depends(get_auth)
):
    require_identity(auth)
    images = request.app.state.images

    file_path = images.store(image)
    if file_path is None:
        response.status_code = 200
        return ImageStoredOut(message="No file provided!")

    if old_path:
        images.delete(old_path)
    return ImageStoredOut(message="File stored.", file_path=file_path)
