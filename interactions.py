"""
방문자 상호작용 분류 및 표시 유틸리티
actionType 문자열의 부분 일치로 카테고리를 판별한다 (순수 함수)
"""

from typing import Any

# 카테고리 → actionType 검색 키워드
INTERACTION_CATEGORIES = {
    "all": None,
    "pdf": "pdf",
    "video": "video",
    "image": "image",
    "login": "login",
    "entry": "entry",
    "exit": "exit",
}


def matches_category(interaction: dict[str, Any], category: str) -> bool:
    keyword = INTERACTION_CATEGORIES.get(category)
    if keyword is None:
        return True
    return keyword in str(interaction.get("actionType") or "").lower()


def filter_interactions(
    interactions: list[dict[str, Any]], category: str
) -> list[dict[str, Any]]:
    """카테고리별 필터링 ("all"이면 원본 그대로)"""
    if category not in INTERACTION_CATEGORIES:
        raise ValueError(f"Unknown interaction category: {category}")
    if category == "all":
        return interactions
    return [item for item in interactions if matches_category(item, category)]


def count_by_category(interactions: list[dict[str, Any]]) -> dict[str, int]:
    """카테고리 탭에 표시할 건수"""
    return {
        category: len(filter_interactions(interactions, category))
        for category in INTERACTION_CATEGORIES
    }


def describe_interaction(interaction: dict[str, Any]) -> str:
    """상호작용을 사람이 읽을 수 있는 문장으로 변환"""
    action_type = interaction.get("actionType") or ""
    element = interaction.get("actionElement") or ""

    if action_type == "click":
        if element == "pdf":
            return "Downloaded PDF"
        if element == "link":
            return "Clicked on link"
        if element == "button":
            return "Clicked button"
        return f"Clicked on {element}"

    if action_type == "view":
        if element.startswith("booth"):
            return "Viewed booth"
        if element == "product":
            return "Viewed product details"
        return f"Viewed {element}"

    if action_type == "watch":
        return "Watched video"
    if action_type == "download":
        return f"Downloaded {element}"
    if action_type == "login":
        return "Logged in"
    if action_type == "logout":
        return "Logged out"

    return f"{action_type} {element}"


def interaction_details(interaction: dict[str, Any]) -> tuple[str, str | None]:
    """상세 텍스트와 배지 종류 (success/info/None)"""
    action_type = interaction.get("actionType")

    if interaction.get("actionSubType"):
        return interaction["actionSubType"], "info"
    if action_type == "watch":
        return "100% Watched", "success"
    if action_type == "download" or (
        action_type == "click" and interaction.get("actionElement") == "pdf"
    ):
        return "Downloaded", "info"
    if action_type == "login":
        return "Successful", "success"
    return "-", None
