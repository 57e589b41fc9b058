"""
원격 REST API 클라이언트 모듈
모든 요청에 Bearer 토큰을 붙이고 base URL을 한 곳에서 관리한다
"""

from collections.abc import Callable
from typing import Any

import httpx

from app_logging import get_logger

logger = get_logger("api")


class ApiError(Exception):
    """API 요청 실패 (네트워크 오류 또는 2xx 이외 응답)"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_error_message(response: httpx.Response) -> str:
    """응답 본문에서 사람이 읽을 수 있는 오류 메시지 추출"""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for field in ("message", "error"):
            value = body.get(field)
            if isinstance(value, str) and value:
                return value

    text = response.text.strip()
    if text:
        return text
    return f"Request failed with status {response.status_code}"


class ApiClient:
    """httpx 기반 API 클라이언트"""

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], str | None] | None = None,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        # 세션마다 토큰이 다르므로 요청 시점에 토큰을 읽어온다
        self.token_provider = token_provider or (lambda: None)
        self._client = httpx.Client(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    def request(self, method: str, path: str, **kwargs) -> Any:
        """요청 전송 후 JSON 본문 반환 (본문이 없으면 None)"""
        headers = self._headers(kwargs.pop("headers", None))

        try:
            response = self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("[API] %s %s 연결 실패: %s", method, path, e)
            raise ApiError("Unable to reach the server") from e

        if response.is_error:
            message = extract_error_message(response)
            logger.warning(
                "[API] %s %s -> %s: %s", method, path, response.status_code, message
            )
            raise ApiError(message, status_code=response.status_code)

        logger.debug("[API] %s %s -> %s", method, path, response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)

    def close(self):
        """내부 HTTP 세션 종료"""
        self._client.close()
