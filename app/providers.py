# app/providers.py

"""
Application-wide context for every page: the signed-in session and the
colour theme. ``provide`` runs once at the top of each script run; pages only
read the contexts through ``current_session`` and ``current_theme``.
"""

import logging
from dataclasses import dataclass
import streamlit as st
from app.services.api import Failure, get_session


logger = logging.getLogger(__name__)

SESSION_KEY = "session"
THEME_KEY = "theme"
TOKEN_COOKIE = "access_token"


# -------------------------------
# Context values
# -------------------------------

@dataclass(frozen=True)
class Session:
    access_token: str
    user: dict
    expires: str | None = None


@dataclass(frozen=True)
class ThemeSettings:
    default_theme: str = "dark"
    enable_system: bool = True
    disable_transition_on_change: bool = False


@dataclass(frozen=True)
class Theme:
    name: str
    transition: bool = True

    @property
    def palette(self) -> dict:
        return PALETTES[self.name]


PALETTES = {
    "light": {
        "text": "#1f2937",
        "muted": "#6b7280",
        "surface": "#e5e7eb",
        "initial": "#4b5563",
        "error_bg": "#fef2f2",
        "error_text": "#ef4444",
    },
    "dark": {
        "text": "#f3f4f6",
        "muted": "#9ca3af",
        "surface": "#374151",
        "initial": "#d1d5db",
        "error_bg": "rgba(127, 29, 29, 0.2)",
        "error_text": "#f87171",
    },
}

THEME_SETTINGS = ThemeSettings()


def _state(state):
    return st.session_state if state is None else state


# -------------------------------
# Theme
# -------------------------------

def resolve_theme(settings: ThemeSettings, system_preference: str | None = None) -> Theme:
    name = settings.default_theme
    if settings.enable_system and system_preference in PALETTES:
        name = system_preference
    return Theme(name=name, transition=not settings.disable_transition_on_change)


def theme_css(theme: Theme) -> str:
    p = theme.palette
    transition = "transition: color 200ms, background-color 200ms;" if theme.transition else ""
    return f"""
<style>
.quill-text {{ color: {p["text"]}; {transition} }}
.quill-muted {{ color: {p["muted"]}; font-size: 0.75rem; {transition} }}
.quill-avatar {{
    width: 2rem; height: 2rem; border-radius: 9999px; object-fit: cover;
    background: {p["surface"]}; color: {p["initial"]};
    display: flex; align-items: center; justify-content: center;
    font-size: 0.875rem; font-weight: 500; {transition}
}}
.quill-error {{
    background: {p["error_bg"]}; color: {p["error_text"]};
    padding: 0.75rem; border-radius: 0.5rem; font-size: 0.875rem; {transition}
}}
</style>
"""


# -------------------------------
# Session
# -------------------------------

def restore_session(cookies) -> Session | None:
    """
    Rebuilds the session from the token cookie, dropping the cookie when the
    backend no longer accepts it.
    """
    token = cookies.get(TOKEN_COOKIE)
    if not token:
        return None

    result = get_session(token)
    if isinstance(result, Failure):
        if result.status == 401:
            del cookies[TOKEN_COOKIE]
            cookies.save()
        else:
            logger.warning("Could not restore session: %s", result.message)
        return None

    return Session(access_token=token, user=result.data["user"], expires=result.data.get("expires"))


def sign_in(cookies, access_token, state=None) -> Session | Failure:
    result = get_session(access_token)
    if isinstance(result, Failure):
        return result

    session = Session(access_token=access_token, user=result.data["user"], expires=result.data.get("expires"))
    cookies[TOKEN_COOKIE] = access_token
    cookies.save()
    _state(state)[SESSION_KEY] = session
    return session


def sign_out(cookies, state=None):
    if TOKEN_COOKIE in cookies:
        del cookies[TOKEN_COOKIE]
        cookies.save()
    _state(state)[SESSION_KEY] = None


# -------------------------------
# Composition root
# -------------------------------

def provide(cookies, system_preference=None, settings=THEME_SETTINGS, state=None):
    state = _state(state)
    if SESSION_KEY not in state:
        state[SESSION_KEY] = restore_session(cookies)
    state[THEME_KEY] = resolve_theme(settings, system_preference)


def current_session(state=None) -> Session | None:
    return _state(state).get(SESSION_KEY)


def current_theme(state=None) -> Theme:
    theme = _state(state).get(THEME_KEY)
    return theme or resolve_theme(THEME_SETTINGS)
