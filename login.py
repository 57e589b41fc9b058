"""
로그인 / 관리자 가입 페이지
인증되지 않은 상태에서만 라우트 가드가 이 화면을 보여준다

제출은 두 번의 실행으로 나뉜다. 제출한 실행에서는 입력값만 보관하고 재실행하며,
다음 실행에서 처리 중 메시지를 보여주면서 서버에 요청한다.
"""

import streamlit as st

from auth import AuthError, SessionStore
from components import field_error, go_to
from forms import validate_login, validate_register
from router import ANALYTICS_PATH, LOGIN_PATH, REGISTER_PATH

PENDING_KEY = "auth:pending"


def _auth_header(title: str, subtitle: str):
    st.markdown(
        f"""
    <div style="text-align: center; padding: 1.5rem 0;">
        <h2>{title}</h2>
        <p style="color: #666;">{subtitle}</p>
    </div>
    """,
        unsafe_allow_html=True,
    )


def show_auth_page(store: SessionStore, path: str):
    """인증 경로에 맞는 폼 표시"""
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        if path == REGISTER_PATH:
            show_register_page(store)
        else:
            show_login_page(store)


def _submit(action: str, **fields):
    """입력값을 보관하고 재실행 (다음 실행에서 처리)"""
    st.session_state[PENDING_KEY] = {"action": action, **fields}
    st.rerun()


def _process_pending(store: SessionStore, action: str, message: str) -> str | None:
    """보관된 제출 처리. 실패 시 오류 메시지 반환, 성공 시 대시보드로 이동"""
    pending = st.session_state.get(PENDING_KEY)
    if not pending or pending["action"] != action:
        return None

    # 입력값은 이번 실행에서만 사용
    del st.session_state[PENDING_KEY]
    fields = {key: value for key, value in pending.items() if key != "action"}

    st.info(f"🔄 {message}")
    try:
        if action == "login":
            store.login(**fields)
        else:
            store.register(**fields)
    except AuthError as e:
        return e.message

    go_to(ANALYTICS_PATH)
    return None


def show_login_page(store: SessionStore):
    """로그인 페이지 표시"""
    _auth_header("Admin Sign In", "Sign in to manage your booth")

    auth_error = _process_pending(store, "login", "Signing in...")
    errors: dict[str, str] = {}

    with st.form("login_form", clear_on_submit=False):
        email = st.text_input("Email Address", placeholder="admin@example.com", key="login_email")
        password = st.text_input(
            "Password", type="password", placeholder="••••••••", key="login_password"
        )

        submit_button = st.form_submit_button(
            "Sign in", use_container_width=True, type="primary"
        )

    if submit_button:
        errors = validate_login(email, password)
        if not errors:
            _submit("login", email=email, password=password)

    if auth_error:
        st.error(auth_error)

    field_error(errors.get("email"))
    field_error(errors.get("password"))

    st.markdown("---")
    if st.button("Don't have an account? Register", use_container_width=True):
        go_to(REGISTER_PATH)


def show_register_page(store: SessionStore):
    """관리자 가입 페이지 표시"""
    _auth_header("Create Admin Account", "A secret code from your organizer is required")

    auth_error = _process_pending(store, "register", "Creating account...")
    errors: dict[str, str] = {}

    with st.form("register_form", clear_on_submit=False):
        username = st.text_input("Username", placeholder="admin_user", key="register_username")
        email = st.text_input(
            "Email Address", placeholder="admin@example.com", key="register_email"
        )
        password = st.text_input(
            "Password", type="password", placeholder="••••••••", key="register_password"
        )
        confirm_password = st.text_input(
            "Confirm Password",
            type="password",
            placeholder="••••••••",
            key="register_confirm_password",
        )
        secret_code = st.text_input(
            "Secret Code",
            type="password",
            help="Provided by the platform organizer",
            key="register_secret_code",
        )

        submit_button = st.form_submit_button(
            "Register", use_container_width=True, type="primary"
        )

    if submit_button:
        errors = validate_register(
            username, email, password, confirm_password, secret_code
        )
        if not errors:
            _submit(
                "register",
                username=username,
                email=email,
                password=password,
                secret_code=secret_code,
            )

    if auth_error:
        st.error(auth_error)

    for field in ("username", "email", "password", "confirm_password", "secret_code"):
        field_error(errors.get(field))

    st.markdown("---")
    if st.button("Already have an account? Sign in", use_container_width=True):
        go_to(LOGIN_PATH)
