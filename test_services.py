"""
도메인 서비스 테스트
엔드포인트 경로, 요청 본문, 응답 정규화 검증
"""

import json

import httpx
import pytest

from api_client import ApiClient, ApiError
from loader import Resource
from services import AuthService, MediaService, VisitorService, parse_auth_response

BOOTH_ID = "f17ec1f8-78bd-4553-bf6f-9a139f21aba3"


class Recorder:
    """요청을 기록하고 경로별로 미리 정한 응답을 돌려주는 핸들러"""

    def __init__(self, routes: dict[tuple[str, str], httpx.Response]):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.routes.get(
            (request.method, request.url.path), httpx.Response(404, json={"message": "nope"})
        )


def make_client(recorder):
    return ApiClient(
        "http://api.test/api", token_provider=lambda: "tok", transport=httpx.MockTransport(recorder)
    )


def test_parse_auth_response_accepts_admin_details():
    token, user = parse_auth_response(
        {"token": "t", "adminDetails": {"id": 7, "username": "a", "email": "a@b.c", "role": "ADMIN"}}
    )

    assert token == "t"
    assert user == {"id": "7", "username": "a", "email": "a@b.c", "role": "ADMIN"}


def test_parse_auth_response_accepts_user_key():
    token, user = parse_auth_response({"token": "t", "user": {"id": "u1", "username": "b"}})

    assert user["id"] == "u1"
    assert user["email"] == ""


@pytest.mark.parametrize("data", [None, [], {"token": "t"}, {"user": {"id": "1"}}])
def test_parse_auth_response_rejects_incomplete(data):
    with pytest.raises(ApiError, match="Unexpected response"):
        parse_auth_response(data)


def test_login_posts_credentials():
    recorder = Recorder(
        {
            ("POST", "/api/auth/login"): httpx.Response(
                200, json={"token": "t", "adminDetails": {"id": "1", "username": "admin"}}
            )
        }
    )
    token, user = AuthService(make_client(recorder)).login("admin@example.com", "pw")

    assert token == "t" and user["username"] == "admin"
    assert json.loads(recorder.requests[0].content) == {
        "email": "admin@example.com",
        "password": "pw",
    }


def test_register_sends_secret_code():
    recorder = Recorder(
        {
            ("POST", "/api/auth/register"): httpx.Response(
                201, json={"token": "t", "user": {"id": "2", "username": "new"}}
            )
        }
    )
    AuthService(make_client(recorder)).register("new", "new@example.com", "pw1234", "S3CRET")

    body = json.loads(recorder.requests[0].content)
    assert body["secretCode"] == "S3CRET", "secret code 필드명이 다름"
    assert body["username"] == "new"


def test_get_current_user():
    recorder = Recorder(
        {("GET", "/api/auth/me"): httpx.Response(200, json={"id": 3, "username": "me"})}
    )
    user = AuthService(make_client(recorder)).get_current_user()

    assert user["id"] == "3"
    assert recorder.requests[0].headers["Authorization"] == "Bearer tok"


def test_get_booths_groups_media_of_configured_booth():
    recorder = Recorder(
        {
            ("GET", f"/api/booths/booth/{BOOTH_ID}"): httpx.Response(
                200,
                json=[
                    {"id": 1, "fileurl": "a.png", "mediaType": "image", "boothId": BOOTH_ID, "position": 2},
                    {"id": 2, "fileUrl": "b.mp4", "mediaType": "VIDEO", "boothId": BOOTH_ID, "mediaPosition": "1"},
                ],
            )
        }
    )
    booths = MediaService(make_client(recorder), BOOTH_ID).get_booths()

    assert [booth["id"] for booth in booths] == [BOOTH_ID]
    medias = booths[0]["medias"]
    assert medias["IMAGE"][0]["fileUrl"] == "a.png"
    assert medias["IMAGE"][0]["mediaPosition"] == "2"
    assert medias["VIDEO"][0]["id"] == "2"
    assert medias["AUDIO"] == [] and medias["PDF"] == []


def test_get_booths_includes_configured_booth_without_media():
    recorder = Recorder({("GET", f"/api/booths/booth/{BOOTH_ID}"): httpx.Response(200, json=[])})
    booths = MediaService(make_client(recorder), BOOTH_ID).get_booths()

    assert booths == [
        {"id": BOOTH_ID, "medias": {"IMAGE": [], "VIDEO": [], "AUDIO": [], "PDF": []}}
    ]


def test_booth_lookup_endpoints():
    recorder = Recorder(
        {
            ("GET", "/api/booths"): httpx.Response(200, json=[{"id": BOOTH_ID, "name": "Pevonia"}]),
            ("GET", f"/api/booths/{BOOTH_ID}"): httpx.Response(200, json={"id": BOOTH_ID}),
        }
    )
    service = MediaService(make_client(recorder), BOOTH_ID)

    assert service.list_booths() == [{"id": BOOTH_ID, "name": "Pevonia"}]
    assert service.get_booth(BOOTH_ID) == {"id": BOOTH_ID}


def test_upload_media_sends_multipart_fields():
    recorder = Recorder(
        {
            ("POST", "/api/admin/upload"): httpx.Response(
                200, json={"id": 9, "fileName": "logo.png", "mediaType": "IMAGE", "boothId": BOOTH_ID}
            )
        }
    )
    created = MediaService(make_client(recorder), BOOTH_ID).upload_media(
        media_type="IMAGE",
        booth_id=BOOTH_ID,
        position="3",
        file_name="logo.png",
        content=b"png-bytes",
        content_type="image/png",
    )

    request = recorder.requests[0]
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    body = request.content
    for field in (b'name="MediaType"', b'name="BoothId"', b'name="Position"', b'filename="logo.png"'):
        assert field in body, f"multipart 필드 누락: {field!r}"
    assert b"png-bytes" in body
    assert created["fileUrl"] == "logo.png"


def test_delete_media_path():
    recorder = Recorder({("DELETE", "/api/admin/media/42"): httpx.Response(204)})

    assert MediaService(make_client(recorder), BOOTH_ID).delete_media("42") is None
    assert recorder.requests[0].method == "DELETE"


def test_delete_media_failure_raises():
    recorder = Recorder({})

    with pytest.raises(ApiError) as exc_info:
        MediaService(make_client(recorder), BOOTH_ID).delete_media("42")
    assert exc_info.value.status_code == 404


def test_visitor_endpoints_normalize_responses():
    recorder = Recorder(
        {
            ("GET", f"/api/admin/{BOOTH_ID}/visitors"): httpx.Response(
                200, json=[{"id": 5, "username": "kim", "email": "kim@example.com", "visitCount": "3"}]
            ),
            ("GET", f"/api/admin/{BOOTH_ID}/users/analytics"): httpx.Response(
                200,
                json={"totalUsers": 2, "totalVisits": 5, "locationData": [{"location": "Seoul", "count": 2}]},
            ),
            ("GET", f"/api/admin/{BOOTH_ID}/visitor/5/interactions"): httpx.Response(
                200, json=[{"id": 1, "actionType": "CLICK", "actionElement": "PDF"}]
            ),
        }
    )
    service = VisitorService(make_client(recorder), BOOTH_ID)

    visitors = service.get_visitors()
    assert visitors[0]["id"] == "5"
    assert visitors[0]["visitCount"] == 3
    assert visitors[0]["phoneNumber"] is None

    analytics = service.get_analytics()
    assert analytics["totalVisits"] == 5
    assert analytics["locationData"] == [{"location": "Seoul", "count": 2}]

    interactions = service.get_interactions("5")
    assert interactions[0]["actionType"] == "CLICK"
    assert interactions[0]["actionSubType"] is None


def test_analytics_defaults_for_empty_body():
    recorder = Recorder(
        {("GET", f"/api/admin/{BOOTH_ID}/users/analytics"): httpx.Response(200)}
    )
    analytics = VisitorService(make_client(recorder), BOOTH_ID).get_analytics()

    assert analytics == {"totalUsers": 0, "totalVisits": 0, "locationData": []}


@pytest.mark.parametrize(
    "path, body, fetch",
    [
        (f"/api/admin/{BOOTH_ID}/visitors", {"visitors": []}, lambda s: s.get_visitors()),
        (f"/api/admin/{BOOTH_ID}/visitors", ["kim"], lambda s: s.get_visitors()),
        (f"/api/admin/{BOOTH_ID}/visitors", [{"id": 1, "visitCount": "many"}], lambda s: s.get_visitors()),
        (f"/api/admin/{BOOTH_ID}/users/analytics", [{"totalUsers": 1}], lambda s: s.get_analytics()),
        (
            f"/api/admin/{BOOTH_ID}/users/analytics",
            {"totalUsers": 1, "locationData": {"Seoul": 1}},
            lambda s: s.get_analytics(),
        ),
        (f"/api/admin/{BOOTH_ID}/visitor/5/interactions", {"items": []}, lambda s: s.get_interactions("5")),
    ],
)
def test_unexpected_shape_becomes_tab_error(path, body, fetch):
    """형태가 다른 응답도 탭 오류 배너로 처리 (예외가 화면까지 새지 않음)"""
    recorder = Recorder({("GET", path): httpx.Response(200, json=body)})
    service = VisitorService(make_client(recorder), BOOTH_ID)

    resource = Resource("visitors").load(lambda: fetch(service), "Failed to load user data")

    assert resource.is_failed, "예상치 못한 응답 형태가 ApiError로 바뀌지 않음"
    assert resource.error == "Failed to load user data"


def test_unexpected_media_list_becomes_api_error():
    recorder = Recorder(
        {("GET", f"/api/booths/booth/{BOOTH_ID}"): httpx.Response(200, text="<html>oops</html>")}
    )

    with pytest.raises(ApiError, match="Unexpected response"):
        MediaService(make_client(recorder), BOOTH_ID).get_booths()


def test_booth_names_for_upload_selector():
    recorder = Recorder(
        {
            ("GET", "/api/booths"): httpx.Response(
                200, json=[{"id": BOOTH_ID, "name": "Pevonia"}, {"id": "b2"}]
            )
        }
    )

    assert MediaService(make_client(recorder), BOOTH_ID).booth_names() == {
        BOOTH_ID: "Pevonia",
        "b2": "b2",
    }
