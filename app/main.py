# app/main.py

import logging
import streamlit as st
from streamlit_cookies_manager import EncryptedCookieManager
from app.config import COOKIE_PASSWORD, COOKIE_PREFIX
from app.providers import provide, current_session, current_theme, theme_css
from app.ui.login import login_page, logout
from app.ui.articles import articles_page, write_page
from app.ui.comments import invalidate_comments


logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

st.set_page_config(page_title="Quill", layout="centered")

if not COOKIE_PASSWORD:
    raise RuntimeError("COOKIE_PASSWORD is missing. Set it in .env")

cookies = EncryptedCookieManager(prefix=COOKIE_PREFIX, password=COOKIE_PASSWORD)
if not cookies.ready():
    st.stop()


def system_theme():
    return st.context.theme.type


def main_page():
    session = current_session()

    st.sidebar.markdown("## Menu")
    if st.sidebar.button("Articles"):
        st.session_state["page"] = "articles"
        invalidate_comments()
    if session is not None:
        st.sidebar.caption(f"Signed in as {session.user.get('name') or session.user['email']}")
        if st.sidebar.button("Write"):
            st.session_state["page"] = "write"
        if st.sidebar.button("Sign out"):
            logout(cookies)
            st.rerun()
    elif st.sidebar.button("Sign in"):
        st.session_state["page"] = "login"

    page = st.session_state.get("page", "articles")
    if page != st.session_state.get("last_page"):
        invalidate_comments()
    st.session_state["last_page"] = page

    if page == "login" and session is None:
        login_page(cookies)
    elif page == "write":
        write_page()
    else:
        articles_page()


provide(cookies, system_preference=system_theme())
st.markdown(theme_css(current_theme()), unsafe_allow_html=True)
main_page()
