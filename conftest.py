"""
테스트 공용 fixture
쿠키 대신 메모리 저장소, 원격 API 대신 가짜 서비스를 사용
"""

import copy

import pytest

from api_client import ApiError
from auth import Session, SessionStore

ADMIN_USER = {
    "id": "admin-1",
    "username": "booth_admin",
    "email": "admin@example.com",
    "role": "ADMIN",
}


class MemoryStorage:
    """CookieStorage와 같은 인터페이스의 메모리 저장소"""

    def __init__(
        self,
        initial: dict[str, str] | None = None,
        fail_on: str | None = None,
        ready: bool = True,
    ):
        self.values: dict[str, str] = dict(initial or {})
        self.fail_on = fail_on
        self.ready = ready
        self.writes: list[str] = []

    def is_ready(self) -> bool:
        return self.ready

    def get(self, name: str) -> str | None:
        return self.values.get(name)

    def set(self, name: str, value: str):
        if name == self.fail_on:
            raise OSError(f"cannot write {name}")
        self.writes.append(name)
        self.values[name] = value

    def delete(self, name: str):
        self.values.pop(name, None)


class LateCookieFactory:
    """첫 실행에는 응답 전인 쿠키 컴포넌트, 이후에는 실제 쿠키를 돌려주는 저장소 팩토리"""

    def __init__(self, values: dict[str, str] | None = None):
        self.storage = MemoryStorage(values)
        self.runs = 0

    def __call__(self):
        self.runs += 1
        if self.runs == 1:
            return MemoryStorage(ready=False)
        return self.storage


class FakeAuthService:
    """인증 서비스 대역 (호출 기록)"""

    def __init__(self, token: str = "token-123", user: dict | None = None, error=None):
        self.token = token
        self.user = dict(user or ADMIN_USER)
        self.error = error
        self.calls: list[tuple] = []

    def login(self, email, password):
        self.calls.append(("login", email, password))
        if self.error:
            raise self.error
        return self.token, dict(self.user)

    def register(self, username, email, password, secret_code):
        self.calls.append(("register", username, email, secret_code))
        if self.error:
            raise self.error
        return self.token, dict(self.user)

    def get_current_user(self):
        self.calls.append(("me",))
        if self.error:
            raise self.error
        return dict(self.user)


class FakeMediaService:
    """미디어 서비스 대역 (삭제 시 목록에서 실제로 제거)"""

    def __init__(self, booths=None, upload_error=None, delete_error=None):
        self.booths = booths or []
        self.upload_error = upload_error
        self.delete_error = delete_error
        self.uploads: list[dict] = []
        self.deleted: list[str] = []
        self.get_calls = 0

    def get_booths(self):
        self.get_calls += 1
        return copy.deepcopy(self.booths)

    def upload_media(self, **kwargs):
        if self.upload_error:
            raise self.upload_error
        self.uploads.append(kwargs)

    def delete_media(self, media_id):
        if self.delete_error:
            raise self.delete_error
        self.deleted.append(media_id)
        for booth in self.booths:
            for items in booth["medias"].values():
                items[:] = [item for item in items if item["id"] != media_id]


class FakeUpload:
    """Streamlit UploadedFile 대역"""

    def __init__(self, name="logo.png", content=b"\x89PNG", type="image/png"):
        self.name = name
        self.type = type
        self._content = content

    def getvalue(self):
        return self._content


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def fake_auth():
    return FakeAuthService()


@pytest.fixture
def session_store(memory_storage, fake_auth):
    store = SessionStore(Session(), memory_storage, fake_auth)
    store.initialize()
    return store


@pytest.fixture
def api_error():
    return ApiError("Invalid email or password", status_code=401)
