# 입력값 검사
# 첫 번째 오류에서 멈추지 않고, 위반 사항을 모두 모아서 돌려줍니다.

from email_validator import EmailNotValidError, validate_email

MIN_TITLE_LENGTH = 5
MIN_CONTENT_LENGTH = 5
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # bcrypt 가 처리할 수 있는 최대 길이


def _check_text(errors: list[dict], label: str, value: str | None, min_length: int) -> None:
    value = (value or "").strip()
    if not value:
        errors.append({"message": f"{label} should not be empty"})
    if len(value) < min_length:
        errors.append({"message": f"{label} should have a minimum length of {min_length}"})


def post_input_errors(title: str | None, content: str | None) -> list[dict]:
    errors: list[dict] = []
    _check_text(errors, "Title", title, MIN_TITLE_LENGTH)
    _check_text(errors, "Content", content, MIN_CONTENT_LENGTH)
    return errors


def signup_errors(email: str | None, password: str | None, name: str | None) -> list[dict]:
    errors: list[dict] = []
    try:
        validate_email(email or "", check_deliverability=False)
    except EmailNotValidError:
        errors.append({"message": "E-Mail is invalid."})
    if not password or len(password.strip()) < MIN_PASSWORD_LENGTH:
        errors.append({"message": "Password too short."})
    elif len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append({"message": f"Password too long (max {MAX_PASSWORD_BYTES} bytes)."})
    if not (name or "").strip():
        errors.append({"message": "Name should not be empty"})
    return errors
