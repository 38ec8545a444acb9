# 환경 변수 설정
# .env 파일을 읽어서 서버 전체에서 쓰는 설정값을 정의합니다.

import os

from dotenv import load_dotenv

load_dotenv()  # 필수

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./feed.db")

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")  # 배포 환경에서는 반드시 .env에 설정
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

POSTS_PER_PAGE = int(os.getenv("POSTS_PER_PAGE", "2"))
IMAGES_DIR = os.getenv("IMAGES_DIR", os.path.join(os.getcwd(), "images"))

CORS_ALLOW_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" 또는 "json"
