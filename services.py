"""
도메인 서비스 모듈
UI 요청을 API 호출로 변환하고 응답 형태를 정규화한다 (auth / media / visitors)
"""

from typing import Any

from api_client import ApiClient, ApiError
from media import empty_medias, group_media_by_booth, normalize_media_item

UNEXPECTED_RESPONSE = "Unexpected response from server"


def expect_rows(data: Any) -> list[dict[str, Any]]:
    """목록 응답 검증 (본문이 없으면 빈 목록)"""
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
        raise ApiError(UNEXPECTED_RESPONSE)
    return data


def expect_object(data: Any) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ApiError(UNEXPECTED_RESPONSE)
    return data


def as_count(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError) as e:
        raise ApiError(UNEXPECTED_RESPONSE) from e


def build_user_record(raw: dict[str, Any]) -> dict[str, Any]:
    """세션에 저장할 관리자 정보만 추림"""
    return {
        "id": str(raw.get("id", "")),
        "username": raw.get("username") or "",
        "email": raw.get("email") or "",
        "role": raw.get("role") or "",
    }


def parse_auth_response(data: Any) -> tuple[str, dict[str, Any]]:
    """로그인/가입 응답에서 (token, user) 추출

    응답의 사용자 정보는 adminDetails 또는 user 키로 온다.
    """
    if not isinstance(data, dict):
        raise ApiError("Unexpected response from authentication server")

    token = data.get("token")
    details = data.get("adminDetails") or data.get("user")
    if not token or not isinstance(details, dict):
        raise ApiError("Unexpected response from authentication server")

    return token, build_user_record(details)


class AuthService:
    """인증 엔드포인트"""

    def __init__(self, client: ApiClient):
        self.client = client

    def login(self, email: str, password: str) -> tuple[str, dict[str, Any]]:
        data = self.client.post("/auth/login", json={"email": email, "password": password})
        return parse_auth_response(data)

    def register(
        self, username: str, email: str, password: str, secret_code: str
    ) -> tuple[str, dict[str, Any]]:
        data = self.client.post(
            "/auth/register",
            json={
                "username": username,
                "email": email,
                "password": password,
                "secretCode": secret_code,
            },
        )
        return parse_auth_response(data)

    def get_current_user(self) -> dict[str, Any]:
        """현재 토큰의 사용자 조회 (GET /auth/me)"""
        data = self.client.get("/auth/me")
        if not isinstance(data, dict):
            raise ApiError("Unexpected response from authentication server")
        return build_user_record(data)


class MediaService:
    """부스 미디어 엔드포인트"""

    def __init__(self, client: ApiClient, booth_id: str):
        self.client = client
        self.booth_id = booth_id

    def list_booths(self) -> list[dict[str, Any]]:
        """GET /booths (원본 형태 그대로)"""
        return expect_rows(self.client.get("/booths"))

    def booth_names(self) -> dict[str, str]:
        """부스 id → 표시 이름 (업로드 대상 선택 상자용)"""
        return {
            str(booth.get("id", "")): booth.get("name") or str(booth.get("id", ""))
            for booth in self.list_booths()
        }

    def get_booth(self, booth_id: str) -> dict[str, Any]:
        """GET /booths/{id}

        대시보드 화면은 목록 조회만 사용하며, 단일 부스 조회는 API 클라이언트
        범위를 맞추기 위해 제공한다.
        """
        return expect_object(self.client.get(f"/booths/{booth_id}"))

    def get_booth_media(self, booth_id: str | None = None) -> list[dict[str, Any]]:
        """부스의 평면 미디어 목록"""
        items = expect_rows(self.client.get(f"/booths/booth/{booth_id or self.booth_id}"))
        return [normalize_media_item(item) for item in items]

    def get_booths(self) -> list[dict[str, Any]]:
        """설정된 부스의 미디어를 부스별·타입별로 그룹핑한 목록

        미디어가 하나도 없어도 첫 업로드를 할 수 있도록 설정된 부스는 항상 포함
        """
        booths = group_media_by_booth(self.get_booth_media())
        if not any(booth["id"] == self.booth_id for booth in booths):
            booths.insert(0, {"id": self.booth_id, "medias": empty_medias()})
        return booths

    def upload_media(
        self,
        media_type: str,
        booth_id: str,
        position: str,
        file_name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> dict[str, Any] | None:
        data = self.client.post(
            "/admin/upload",
            data={"MediaType": media_type, "BoothId": booth_id, "Position": position},
            files={"file": (file_name, content, content_type)},
        )
        return normalize_media_item(data) if isinstance(data, dict) else None

    def delete_media(self, media_id: str) -> None:
        self.client.delete(f"/admin/media/{media_id}")


def normalize_visitor(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": str(raw.get("id", "")),
        "username": raw.get("username") or "",
        "email": raw.get("email") or "",
        "phoneNumber": raw.get("phoneNumber"),
        "institution": raw.get("institution"),
        "location": raw.get("location"),
        "visitCount": as_count(raw.get("visitCount")),
        "createdAt": raw.get("createdAt"),
        "recentEntryTime": raw.get("recentEntryTime"),
        "recentExitTime": raw.get("recentExitTime"),
    }


def normalize_analytics(raw: dict[str, Any] | None) -> dict[str, Any]:
    raw = expect_object(raw)
    return {
        "totalUsers": as_count(raw.get("totalUsers")),
        "totalVisits": as_count(raw.get("totalVisits")),
        "locationData": [
            {"location": row.get("location"), "count": as_count(row.get("count"))}
            for row in expect_rows(raw.get("locationData"))
        ],
    }


class VisitorService:
    """방문자/통계 엔드포인트"""

    def __init__(self, client: ApiClient, booth_id: str):
        self.client = client
        self.booth_id = booth_id

    def get_visitors(self) -> list[dict[str, Any]]:
        data = expect_rows(self.client.get(f"/admin/{self.booth_id}/visitors"))
        return [normalize_visitor(row) for row in data]

    def get_analytics(self) -> dict[str, Any]:
        return normalize_analytics(self.client.get(f"/admin/{self.booth_id}/users/analytics"))

    def get_interactions(self, visitor_id: str) -> list[dict[str, Any]]:
        data = expect_rows(
            self.client.get(f"/admin/{self.booth_id}/visitor/{visitor_id}/interactions")
        )
        return [
            {
                "id": str(row.get("id", "")),
                "boothId": row.get("boothId"),
                "visitorId": row.get("visitorId"),
                "actionElement": row.get("actionElement") or "",
                "actionType": row.get("actionType") or "",
                "actionSubType": row.get("actionSubType"),
                "createdAt": row.get("createdAt"),
            }
            for row in data
        ]
