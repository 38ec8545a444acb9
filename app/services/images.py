# 게시글 이미지 파일 관리
# 업로드 파일은 <images_dir>/<고유값>-<파일명> 으로 저장되고, 게시글에는 images/<파일> 경로로 기록됨.
# 같은 폴더가 /images 로 정적 서빙됨.

import logging
import os
import re
import shutil
import uuid

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({"image/png", "image/jpg", "image/jpeg"})
URL_PREFIX = "images"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class ImageStore:
    def __init__(self, directory: str):
        self.directory = os.path.abspath(directory)

    def ensure_directory(self) -> None:
        os.makedirs(self.directory, exist_ok=True)

    def store(self, upload) -> str | None:
        # 허용되지 않은 타입은 조용히 버림 (None). 이미지가 필수인지는 호출하는 쪽에서 판단
        if upload is None or not upload.filename:
            return None
        if upload.content_type not in ALLOWED_MIME_TYPES:
            logger.info("Ignoring upload %r with type %s", upload.filename, upload.content_type)
            return None

        base_name = _UNSAFE_CHARS.sub("-", os.path.basename(upload.filename)) or "image"
        filename = f"{uuid.uuid4().hex}-{base_name}"
        self.ensure_directory()
        with open(os.path.join(self.directory, filename), "wb") as out:
            shutil.copyfileobj(upload.file, out)
        return f"{URL_PREFIX}/{filename}"

    def resolve(self, relative_path: str) -> str | None:
        # images/<파일> 의 절대 경로. 다른 곳을 가리키면 None
        normalized = relative_path.replace("\\", "/")
        prefix = f"{URL_PREFIX}/"
        if not normalized.startswith(prefix):
            return None
        filename = os.path.basename(normalized[len(prefix):])
        if not filename:
            return None
        return os.path.join(self.directory, filename)

    def delete(self, relative_path: str | None) -> None:
        # best-effort 삭제. 실패해도 로그만 남김
        if not relative_path:
            return
        path = self.resolve(relative_path)
        if path is None:
            logger.warning("Refusing to delete image outside %s: %s", URL_PREFIX, relative_path)
            return
        try:
            os.remove(path)
        except OSError as e:
            logger.warning("Could not delete image %s: %s", relative_path, e)
        else:
            logger.debug("Deleted image %s", relative_path)
