"""
공통 UI 컴포넌트
스피너, 오류 배너, 카드, 확인 다이얼로그 등 상태 없는 렌더링 헬퍼
"""

from collections.abc import Callable
from contextlib import contextmanager
from typing import Any

import streamlit as st

from loader import LoadStatus, Resource

BADGE_COLORS = {
    "success": "green",
    "info": "blue",
    "warning": "orange",
    "error": "red",
}


def go_to(path: str):
    """경로 이동 (query parameter 교체 후 재실행)"""
    st.query_params["path"] = path
    st.rerun()


def loading_indicator(text: str = "Loading..."):
    st.info(f"⏳ {text}")


def error_banner(message: str):
    st.error(f"**Error:** {message}")


def field_error(message: str | None):
    """필드 단위 검증 오류"""
    if message:
        st.markdown(f":red[{message}]")


def status_badge(text: str, badge_type: str | None) -> str:
    """markdown 배지 문자열 (배지 종류가 없으면 텍스트 그대로)"""
    color = BADGE_COLORS.get(badge_type or "")
    if not color:
        return text
    return f":{color}-background[{text}]"


@contextmanager
def card(title: str | None = None):
    """테두리 있는 카드 영역"""
    with st.container(border=True):
        if title:
            st.markdown(f"#### {title}")
        yield


def render_resource(
    resource: Resource,
    render_data: Callable[[Any], None],
    empty_message: str = "No data available",
):
    """로딩 → 스피너만, 실패 → 오류 배너와 재시도 버튼, 빈 결과 → 안내 문구

    재시도는 리소스를 IDLE로 되돌리고, 같은 실행에서 탭이 다시 조회한다.
    """
    if resource.status in (LoadStatus.IDLE, LoadStatus.LOADING):
        loading_indicator()
        return

    if resource.is_failed:
        error_banner(resource.error or "Something went wrong")
        st.button("Try again", key=f"retry_{resource.name}", on_click=resource.reset)
        return

    if resource.is_empty:
        st.info(empty_message)
        return

    render_data(resource.data)


def confirm_dialog(
    title: str,
    message: str,
    on_confirm: Callable[[], None],
    on_cancel: Callable[[], None] | None = None,
):
    """예/아니오 확인 다이얼로그"""

    @st.dialog(title)
    def _dialog():
        st.write(message)
        col1, col2 = st.columns(2)

        with col1:
            if st.button("Yes", type="primary", use_container_width=True):
                on_confirm()
                st.rerun()

        with col2:
            if st.button("No", use_container_width=True):
                if on_cancel:
                    on_cancel()
                st.rerun()

    _dialog()
