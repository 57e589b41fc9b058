"""
부스 미디어 관리 모듈
미디어 목록 정규화/그룹핑, 표시 URL 생성, 업로드·삭제 흐름
"""

from dataclasses import dataclass
from typing import Any

from api_client import ApiError
from app_logging import get_logger
from loader import Resource

logger = get_logger("media")

MEDIA_TYPES = ("IMAGE", "VIDEO", "AUDIO", "PDF")

# 타입별 최대 슬롯 수
MAX_POSITIONS = {
    "IMAGE": 4,
    "VIDEO": 3,
    "AUDIO": 1,
    "PDF": 4,
}

BOOTHS_ERROR = "Failed to load booth data"
UPLOAD_ERROR = "Failed to upload media"
DELETE_ERROR = "Failed to delete media"
MISSING_FIELDS_ERROR = "Please select a file, booth, and position"


@dataclass
class ActionResult:
    """업로드/삭제 결과"""

    ok: bool
    message: str


def empty_medias() -> dict[str, list[dict[str, Any]]]:
    return {media_type: [] for media_type in MEDIA_TYPES}


def normalize_media_item(raw: dict[str, Any]) -> dict[str, Any]:
    """API 버전마다 다른 필드명을 표준 스키마로 맞춤"""
    file_url = (
        raw.get("fileUrl") or raw.get("fileurl") or raw.get("url") or raw.get("fileName")
    )
    position = raw.get("mediaPosition", raw.get("position"))

    return {
        "id": str(raw.get("id", "")),
        "fileUrl": file_url or "",
        "mediaType": str(raw.get("mediaType", "")).upper(),
        "boothId": str(raw.get("boothId", "")),
        "mediaPosition": str(position) if position is not None else "",
        "createdAt": raw.get("createdAt"),
    }


def group_media_by_booth(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """평면 미디어 목록을 부스별·타입별 구조로 그룹핑

    부스 순서는 목록에서 처음 등장한 순서를 따른다. 알 수 없는 타입도
    버리지 않고 해당 타입 이름의 버킷에 넣는다.
    """
    booths: dict[str, dict[str, Any]] = {}

    for raw in items:
        item = normalize_media_item(raw)
        booth = booths.get(item["boothId"])
        if booth is None:
            booth = {"id": item["boothId"], "medias": empty_medias()}
            booths[item["boothId"]] = booth

        booth["medias"].setdefault(item["mediaType"], []).append(item)

    return list(booths.values())


def media_url(base_url: str, item: dict[str, Any]) -> str:
    """에셋 호스트의 미디어 URL: base + 대문자 타입 + '/' + 파일 경로"""
    return f"{base_url}{item['mediaType'].upper()}/{item['fileUrl']}"


def position_options(media_type: str) -> list[str]:
    """선택 가능한 슬롯 번호 (1..최대값)"""
    max_positions = MAX_POSITIONS.get(media_type.upper(), 0)
    return [str(i) for i in range(1, max_positions + 1)]


def validate_upload(
    file: Any, booth_id: str | None, position: str | None, media_type: str
) -> str | None:
    """업로드 전 클라이언트 검증 (오류 메시지 또는 None)"""
    if file is None or not booth_id or not position:
        return MISSING_FIELDS_ERROR

    if media_type.upper() not in MAX_POSITIONS:
        return f"Unsupported media type: {media_type}"

    if position not in position_options(media_type):
        return (
            f"Position must be between 1 and {MAX_POSITIONS[media_type.upper()]} "
            f"for {media_type.lower()} files"
        )

    return None


def find_booth(booths: list[dict[str, Any]] | None, booth_id: str) -> dict[str, Any] | None:
    for booth in booths or []:
        if booth["id"] == booth_id:
            return booth
    return None


def upload_media(
    media_service,
    booths: Resource,
    *,
    media_type: str,
    booth_id: str,
    position: str,
    file: Any,
) -> ActionResult:
    """검증 → 업로드 → 부스 목록 재조회"""
    error = validate_upload(file, booth_id, position, media_type)
    if error:
        return ActionResult(ok=False, message=error)

    try:
        media_service.upload_media(
            media_type=media_type.upper(),
            booth_id=booth_id,
            position=position,
            file_name=file.name,
            content=file.getvalue(),
            content_type=getattr(file, "type", None) or "application/octet-stream",
        )
    except ApiError as e:
        logger.error("[Media] 업로드 실패: %s", e)
        return ActionResult(ok=False, message=UPLOAD_ERROR)

    logger.info("[Media] %s 업로드 완료 (slot %s)", media_type, position)
    booths.load(media_service.get_booths, BOOTHS_ERROR)
    return ActionResult(ok=True, message="Media uploaded successfully!")


def delete_media(
    media_service, booths: Resource, media_id: str, confirmed: bool
) -> ActionResult | None:
    """확인된 경우에만 삭제 후 부스 목록 재조회 (취소 시 None)"""
    if not confirmed:
        return None

    try:
        media_service.delete_media(media_id)
    except ApiError as e:
        logger.error("[Media] 삭제 실패 (%s): %s", media_id, e)
        return ActionResult(ok=False, message=DELETE_ERROR)

    logger.info("[Media] %s 삭제 완료", media_id)
    booths.load(media_service.get_booths, BOOTHS_ERROR)
    return ActionResult(ok=True, message="Media deleted successfully!")
