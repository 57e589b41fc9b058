"""
관리자 대시보드 페이지
방문자 통계, 부스 미디어 관리, 방문자별 상호작용 로그 조회
"""

from datetime import datetime
from typing import Any

import pandas as pd
import streamlit as st

from auth import SessionStore, display_user_info, require_auth
from components import (
    card,
    confirm_dialog,
    error_banner,
    go_to,
    render_resource,
    status_badge,
)
from context import AppContext
from interactions import (
    INTERACTION_CATEGORIES,
    count_by_category,
    describe_interaction,
    filter_interactions,
    interaction_details,
)
from loader import Resource
from media import (
    BOOTHS_ERROR,
    MAX_POSITIONS,
    MEDIA_TYPES,
    delete_media,
    find_booth,
    media_url,
    position_options,
    upload_media,
)
from router import ANALYTICS_PATH, CUSTOMIZE_PATH, DASHBOARD_TABS, USERS_PATH
from timeutils import format_datetime, format_short_date, time_ago

ANALYTICS_ERROR = "Failed to load analytics data"
VISITORS_ERROR = "Failed to load user data"
INTERACTIONS_ERROR = "Failed to load user interactions"
BOOTH_NAMES_ERROR = "Failed to load booth names"

# 대시보드 상태는 모두 이 접두사로 session_state에 저장 (로그아웃 시 일괄 삭제)
STATE_PREFIX = "dashboard:"
SELECTED_VISITOR_KEY = f"{STATE_PREFIX}selected_visitor"
FLASH_KEY = f"{STATE_PREFIX}customize_flash"
UPLOAD_COUNTER_KEY = f"{STATE_PREFIX}upload_counter"
ACTIVE_TAB_KEY = f"{STATE_PREFIX}active_tab"

# 탭에 들어올 때마다 새로 조회하는 리소스
TAB_RESOURCES = {
    ANALYTICS_PATH: ("analytics",),
    CUSTOMIZE_PATH: ("booths", "booth_names"),
    USERS_PATH: ("visitors", "interactions"),
}

MEDIA_LABELS = {
    "IMAGE": "Images",
    "VIDEO": "Videos",
    "AUDIO": "Audio",
    "PDF": "PDFs",
}


def get_resource(name: str) -> Resource:
    """탭별 리소스 (세션 동안 유지)"""
    key = f"{STATE_PREFIX}resource:{name}"
    if key not in st.session_state:
        st.session_state[key] = Resource(name)
    return st.session_state[key]


def mount_tab(path: str) -> bool:
    """다른 탭에서 들어왔으면 해당 탭의 리소스와 선택 상태를 초기화"""
    if st.session_state.get(ACTIVE_TAB_KEY) == path:
        return False

    st.session_state[ACTIVE_TAB_KEY] = path
    for name in TAB_RESOURCES.get(path, ()):
        get_resource(name).reset()
    if path == USERS_PATH:
        st.session_state.pop(SELECTED_VISITOR_KEY, None)
    return True


def reset_dashboard_state():
    """로그아웃 시 탭 상태 초기화"""
    for key in list(st.session_state.keys()):
        if str(key).startswith(STATE_PREFIX):
            del st.session_state[key]


def average_visits(analytics: dict[str, Any] | None) -> str:
    """방문자 1인당 평균 방문 수 (소수 둘째 자리)"""
    if not analytics or analytics["totalUsers"] <= 0:
        return "0.00"
    return f"{analytics['totalVisits'] / analytics['totalUsers']:.2f}"


def location_percentage(count: int, total_visits: int) -> str:
    if total_visits <= 0:
        return "0.00"
    return f"{count / total_visits * 100:.2f}"


def location_rows(analytics: dict[str, Any]) -> list[dict[str, Any]]:
    return [
        {
            "Location": row["location"] or "Unknown",
            "Total Visits": row["count"],
            "Percentage": f"{location_percentage(row['count'], analytics['totalVisits'])}%",
        }
        for row in analytics["locationData"]
    ]


def filter_visitors(visitors: list[dict[str, Any]], term: str) -> list[dict[str, Any]]:
    """이름/이메일/위치 검색 (대소문자 무시)"""
    term = (term or "").strip().lower()
    if not term:
        return visitors

    return [
        visitor
        for visitor in visitors
        if term in visitor["username"].lower()
        or term in visitor["email"].lower()
        or (visitor["location"] and term in visitor["location"].lower())
    ]


def toggle_selection(selected_id: str | None, visitor_id: str) -> str | None:
    """같은 행을 다시 선택하면 선택 해제"""
    return None if selected_id == visitor_id else visitor_id


def select_visitor(
    visitor_service, interactions: Resource, selected_id: str | None, visitor_id: str
) -> str | None:
    """선택 토글 후 상호작용 목록을 비우거나 다시 조회"""
    new_selection = toggle_selection(selected_id, visitor_id)

    if new_selection is None:
        interactions.reset()
    else:
        interactions.load(
            lambda: visitor_service.get_interactions(new_selection), INTERACTIONS_ERROR
        )

    return new_selection


def interactions_csv(interactions: list[dict[str, Any]]) -> str:
    """선택한 방문자의 상호작용 CSV"""
    csv_data = []
    for interaction in interactions:
        details, _ = interaction_details(interaction)
        csv_data.append(
            {
                "ID": interaction["id"],
                "Activity": describe_interaction(interaction),
                "Action Type": interaction["actionType"],
                "Element": interaction["actionElement"],
                "Details": details,
                "Date & Time": interaction["createdAt"],
            }
        )

    columns = ["ID", "Activity", "Action Type", "Element", "Details", "Date & Time"]
    return pd.DataFrame(csv_data, columns=columns).to_csv(
        index=False, encoding="utf-8-sig"
    )


@require_auth
def show_dashboard(ctx: AppContext, store: SessionStore, path: str):
    """대시보드 메인 (사이드바 메뉴 + 선택된 탭)"""
    st.sidebar.title(f"🏛️ {ctx.settings.booth_name}")
    st.sidebar.caption("Booth Admin")

    for tab_path, label in DASHBOARD_TABS.items():
        if st.sidebar.button(
            label,
            key=f"nav_{label}",
            use_container_width=True,
            type="primary" if tab_path == path else "secondary",
        ):
            go_to(tab_path)

    st.sidebar.markdown("---")
    display_user_info(store, on_logout=reset_dashboard_state)

    mount_tab(path)

    if path == CUSTOMIZE_PATH:
        show_customize_tab(ctx)
    elif path == USERS_PATH:
        show_users_tab(ctx)
    else:
        show_analytics_tab(ctx)


def show_analytics_tab(ctx: AppContext):
    """방문자 통계 탭"""
    st.title("📊 Analytics Dashboard")

    analytics = get_resource("analytics")
    if analytics.is_idle:
        with st.spinner("Loading analytics..."):
            analytics.ensure_loaded(ctx.visitors.get_analytics, ANALYTICS_ERROR)

    render_resource(analytics, _render_analytics)


def _render_analytics(analytics: dict[str, Any]):
    col1, col2, col3 = st.columns(3)

    with col1:
        st.metric("Total Users", analytics["totalUsers"])

    with col2:
        st.metric("Total Visits", analytics["totalVisits"])

    with col3:
        st.metric("Avg. Visits Per User", average_visits(analytics))

    with card("Visitor Locations"):
        rows = location_rows(analytics)
        if not rows:
            st.info("No location data available")
            return

        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

        chart_df = pd.DataFrame(
            {"Location": [r["Location"] for r in rows], "Visits": [r["Total Visits"] for r in rows]}
        ).set_index("Location")
        st.bar_chart(chart_df)


def show_customize_tab(ctx: AppContext):
    """부스 미디어 관리 탭"""
    st.title("🎨 Customize Booth")

    booths = get_resource("booths")
    if booths.is_idle:
        with st.spinner("Loading booth media..."):
            booths.ensure_loaded(ctx.media.get_booths, BOOTHS_ERROR)

    # 이름 조회 실패 시 id로 표시 (배너 없음)
    booth_names = get_resource("booth_names")
    if booth_names.is_idle:
        booth_names.load(ctx.media.booth_names, BOOTH_NAMES_ERROR)

    # 재실행 후에도 결과 메시지를 한 번 보여줌
    flash = st.session_state.pop(FLASH_KEY, None)
    if flash:
        ok, message = flash
        if ok:
            st.success(message)
        else:
            error_banner(message)

    render_resource(
        booths,
        lambda data: _render_customize(ctx, booths, data, booth_names.data or {}),
        empty_message="No booths found.",
    )


def _render_customize(
    ctx: AppContext,
    booths: Resource,
    data: list[dict[str, Any]],
    names: dict[str, str],
):
    booth_ids = [booth["id"] for booth in data]

    def booth_label(booth_id: str) -> str:
        if booth_id == ctx.settings.booth_id:
            return ctx.settings.booth_name
        return names.get(booth_id, booth_id)

    with card("Upload Media"):
        col1, col2, col3 = st.columns(3)

        with col1:
            booth_id = st.selectbox(
                "Select Booth",
                options=booth_ids,
                format_func=booth_label,
                key=f"{STATE_PREFIX}upload_booth",
            )

        with col2:
            media_type = st.selectbox(
                "Media Type",
                options=list(MEDIA_TYPES),
                format_func=lambda x: x.capitalize(),
                key=f"{STATE_PREFIX}upload_type",
            )

        with col3:
            # 타입마다 최대 슬롯이 다르므로 타입별로 위젯 분리
            position = st.selectbox(
                "Position",
                options=position_options(media_type),
                key=f"{STATE_PREFIX}upload_position_{media_type}",
            )

        counter = st.session_state.get(UPLOAD_COUNTER_KEY, 0)
        uploaded_file = st.file_uploader(
            "Upload File", key=f"{STATE_PREFIX}upload_file_{counter}"
        )

        if st.button(
            "Upload Media",
            type="primary",
            disabled=uploaded_file is None,
            key=f"{STATE_PREFIX}upload_button",
        ):
            with st.spinner("Uploading..."):
                result = upload_media(
                    ctx.media,
                    booths,
                    media_type=media_type,
                    booth_id=booth_id,
                    position=position,
                    file=uploaded_file,
                )

            if result.ok:
                # key를 바꿔 파일 입력 초기화
                st.session_state[UPLOAD_COUNTER_KEY] = counter + 1
                st.session_state[FLASH_KEY] = (True, result.message)
                st.rerun()
            else:
                error_banner(result.message)

    booth = find_booth(data, booth_id)
    if booth is None:
        return

    for media_type in MEDIA_TYPES:
        items = booth["medias"].get(media_type, [])
        with card(f"{MEDIA_LABELS[media_type]} ({len(items)}/{MAX_POSITIONS[media_type]})"):
            if not items:
                st.info(f"No {MEDIA_LABELS[media_type].lower()} uploaded yet.")
                continue

            columns = st.columns(MAX_POSITIONS[media_type])
            for column, item in zip(columns, items):
                with column:
                    _render_media_item(ctx, booths, item)


def _render_media_item(ctx: AppContext, booths: Resource, item: dict[str, Any]):
    url = media_url(ctx.settings.media_base_url, item)
    media_type = item["mediaType"]

    if media_type == "IMAGE":
        st.image(url, use_container_width=True)
    elif media_type == "VIDEO":
        st.video(url)
    elif media_type == "AUDIO":
        st.audio(url)
    else:
        st.link_button("📄 View PDF", url, use_container_width=True)

    st.caption(f"Position {item['mediaPosition']}")

    if st.button("🗑️ Delete", key=f"{STATE_PREFIX}delete_{item['id']}"):
        confirm_dialog(
            "Delete media",
            "Are you sure you want to delete this media?",
            on_confirm=lambda: _confirm_delete(ctx, booths, item["id"]),
        )


def _confirm_delete(ctx: AppContext, booths: Resource, media_id: str):
    result = delete_media(ctx.media, booths, media_id, confirmed=True)
    if result is not None:
        st.session_state[FLASH_KEY] = (result.ok, result.message)


def show_users_tab(ctx: AppContext):
    """방문자 관리 탭"""
    st.title("👥 User Management")

    visitors = get_resource("visitors")
    if visitors.is_idle:
        with st.spinner("Loading users..."):
            visitors.ensure_loaded(ctx.visitors.get_visitors, VISITORS_ERROR)

    render_resource(
        visitors,
        lambda data: _render_users(ctx, data),
        empty_message="No users have visited this booth yet.",
    )


def _render_users(ctx: AppContext, visitors: list[dict[str, Any]]):
    interactions = get_resource("interactions")
    selected_id = st.session_state.get(SELECTED_VISITOR_KEY)

    search_term = st.text_input(
        "Search",
        placeholder="Search users by name, email, or location...",
        key=f"{STATE_PREFIX}user_search",
        label_visibility="collapsed",
    )
    filtered = filter_visitors(visitors, search_term)

    with card(f"Users ({len(filtered)})"):
        if not filtered:
            st.info("No users found. Try a different search term.")
        else:
            header = st.columns([2, 3, 2, 1, 2, 2])
            for column, title in zip(
                header, ["Username", "Email", "Location", "Visits", "Phone Number", ""]
            ):
                column.markdown(f"**{title}**")

            for visitor in filtered:
                row = st.columns([2, 3, 2, 1, 2, 2])
                row[0].markdown(f"{visitor['username']}  \n`{visitor['id'][:8]}...`")
                row[1].write(visitor["email"])
                row[2].write(visitor["location"] or "Unknown")
                row[3].write(visitor["visitCount"])
                row[4].write(visitor["phoneNumber"] or "N/A")

                is_selected = visitor["id"] == selected_id
                if row[5].button(
                    "Hide Details" if is_selected else "View Details",
                    key=f"{STATE_PREFIX}toggle_{visitor['id']}",
                    type="primary" if is_selected else "secondary",
                ):
                    st.session_state[SELECTED_VISITOR_KEY] = select_visitor(
                        ctx.visitors, interactions, selected_id, visitor["id"]
                    )
                    st.rerun()

    selected = next((v for v in visitors if v["id"] == selected_id), None)
    if selected is not None:
        # 재시도 후 IDLE이면 다시 조회
        if interactions.is_idle:
            interactions.load(
                lambda: ctx.visitors.get_interactions(selected["id"]), INTERACTIONS_ERROR
            )
        _render_visitor_details(selected, interactions)


def _render_visitor_details(visitor: dict[str, Any], interactions: Resource):
    with card(f"{visitor['username']}'s Interactions"):
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("User Since", format_short_date(visitor["createdAt"]))
        col2.metric("Total Visits", visitor["visitCount"])
        col3.metric(
            "Recent Entry",
            time_ago(visitor["recentEntryTime"]) if visitor["recentEntryTime"] else "-",
        )
        col4.metric(
            "Recent Exit",
            time_ago(visitor["recentExitTime"]) if visitor["recentExitTime"] else "-",
        )
        if visitor["institution"]:
            st.caption(f"Institution: {visitor['institution']}")

        render_resource(
            interactions,
            lambda data: _render_interactions(visitor, data),
            empty_message="No interactions found for this user.",
        )


def _render_interactions(visitor: dict[str, Any], interactions: list[dict[str, Any]]):
    st.markdown("##### Recent Activities")

    counts = count_by_category(interactions)
    category = st.radio(
        "Filter",
        options=list(INTERACTION_CATEGORIES),
        format_func=lambda c: f"{c.capitalize()} ({counts[c]})",
        horizontal=True,
        key=f"{STATE_PREFIX}interaction_category",
        label_visibility="collapsed",
    )
    filtered = filter_interactions(interactions, category)

    if not filtered:
        st.info(f"No {category} interactions for this user.")
        return

    header = st.columns([3, 2, 2])
    for column, title in zip(header, ["Activity", "Date & Time", "Details"]):
        column.markdown(f"**{title}**")

    for interaction in filtered:
        row = st.columns([3, 2, 2])
        row[0].write(describe_interaction(interaction))
        row[1].write(format_datetime(interaction["createdAt"]))
        text, badge_type = interaction_details(interaction)
        row[2].markdown(status_badge(text, badge_type))

    st.download_button(
        label="📥 Export User Data",
        data=interactions_csv(filtered),
        file_name=f"{visitor['username']}_interactions_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv",
        mime="text/csv",
    )
