"""
폼 입력 검증 모듈
필드별 오류 메시지를 반환하며, 오류가 있으면 서버 요청을 보내지 않는다
"""

import re

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
MIN_PASSWORD_LENGTH = 6


def _validate_email(email: str, errors: dict[str, str]):
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.search(email):
        errors["email"] = "Email is invalid"


def validate_login(email: str, password: str) -> dict[str, str]:
    """로그인 폼 검증"""
    errors: dict[str, str] = {}
    _validate_email(email, errors)
    if not password:
        errors["password"] = "Password is required"
    return errors


def validate_register(
    username: str,
    email: str,
    password: str,
    confirm_password: str,
    secret_code: str,
) -> dict[str, str]:
    """가입 폼 검증"""
    errors: dict[str, str] = {}

    if not username:
        errors["username"] = "Username is required"

    _validate_email(email, errors)

    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    if password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"

    if not secret_code:
        errors["secret_code"] = "Secret code is required"

    return errors
