# app/ui/comments.py

import html
import logging
from datetime import datetime
import streamlit as st
from app.providers import current_session
from app.services import api


logger = logging.getLogger(__name__)

STATE_PREFIX = "comment_section_"
DRAFT_PREFIX = "comment_draft_"
POST_ERROR = "Failed to post comment"


# -------------------------------
# Presentation helpers
# -------------------------------

def comment_heading(count: int) -> str:
    return f"{count} {'Comment' if count == 1 else 'Comments'}"


def author_initial(author) -> str:
    name = (author or {}).get("name")
    return name[0] if name else "?"


def author_display_name(author) -> str:
    return (author or {}).get("name") or "Anonymous"


def format_comment_date(created_at: str) -> str:
    """Short date such as 'Mar 5'."""
    if created_at.endswith("Z"):
        created_at = created_at[:-1] + "+00:00"
    dt = datetime.fromisoformat(created_at)
    return f"{dt:%b} {dt.day}"


# -------------------------------
# State
# -------------------------------

def state_key(article_id) -> str:
    return f"{STATE_PREFIX}{article_id}"


def draft_key(article_id) -> str:
    return f"{DRAFT_PREFIX}{article_id}"


def invalidate_comments(state=None):
    """
    Marks every article's comment list for a fresh fetch on its next render.
    Called whenever an article page is (re)opened.
    """
    root = st.session_state if state is None else state
    for key in list(root.keys()):
        if isinstance(key, str) and key.startswith(STATE_PREFIX):
            root[key]["loaded_for"] = None


class CommentSection:
    """
    View state of the comment list and composer for one article.

    State lives in the Streamlit session state so it survives reruns, one
    entry per article: ``comments``, ``submitting``, ``error``, ``generation``
    and ``loaded_for`` under state_key(article_id), and the composer text
    under draft_key(article_id).
    """

    def __init__(self, article_id, state=None):
        self.article_id = article_id
        self._root = st.session_state if state is None else state
        self._key = state_key(article_id)
        self._draft_key = draft_key(article_id)
        if self._key not in self._root:
            self._root[self._key] = {
                "comments": [],
                "submitting": False,
                "error": "",
                "generation": 0,
                "loaded_for": None,
            }
        if self._draft_key not in self._root:
            self._root[self._draft_key] = ""

    @property
    def _s(self):
        return self._root[self._key]

    @property
    def draft_key(self):
        return self._draft_key

    @property
    def comments(self):
        return self._s["comments"]

    @property
    def submitting(self):
        return self._s["submitting"]

    @property
    def error(self):
        return self._s["error"]

    @property
    def draft(self):
        return self._root.get(self._draft_key, "")

    @property
    def can_submit(self):
        return not self.submitting and bool(self.draft.strip())

    def ensure_loaded(self):
        if self._s["loaded_for"] != self.article_id:
            self.refresh()

    def begin_load(self) -> int:
        self._s["generation"] += 1
        self._s["loaded_for"] = self.article_id
        return self._s["generation"]

    def apply_loaded(self, generation, result) -> bool:
        """
        Applies a list response if no newer load has started since it was issued.
        """
        if generation != self._s["generation"]:
            logger.debug("Dropping stale comment list for generation %s", generation)
            return False
        if isinstance(result, api.Failure):
            logger.error("Failed to fetch comments: %s", result.message)
            return False
        self._s["comments"] = result.data
        return True

    def refresh(self):
        generation = self.begin_load()
        self.apply_loaded(generation, api.list_comments(self.article_id))

    def submit(self):
        session = current_session(self._root)
        if session is None:
            return
        if not self.can_submit:
            return

        self._s["error"] = ""
        self._s["submitting"] = True
        try:
            result = api.create_comment(session.access_token, self.article_id, self.draft.strip())
            if isinstance(result, api.Failure):
                logger.warning("Failed to post comment: %s", result.message)
                self._s["error"] = POST_ERROR
            else:
                self._s["comments"] = [result.data] + self._s["comments"]
                self._root[self._draft_key] = ""
        except Exception:
            logger.exception("Failed to post comment")
            self._s["error"] = POST_ERROR
        finally:
            self._s["submitting"] = False


# -------------------------------
# Rendering
# -------------------------------

def _avatar_html(author) -> str:
    image = (author or {}).get("image")
    if image:
        alt = html.escape((author or {}).get("name") or "")
        return f'<img class="quill-avatar" src="{html.escape(image)}" alt="{alt}"/>'
    return f'<div class="quill-avatar">{html.escape(author_initial(author))}</div>'


def render_comment(comment):
    author = comment.get("author")
    avatar_col, body_col = st.columns([1, 12])
    with avatar_col:
        st.markdown(_avatar_html(author), unsafe_allow_html=True)
    with body_col:
        st.markdown(
            f'<span class="quill-text"><b>{html.escape(author_display_name(author))}</b></span> '
            f'<time class="quill-muted">{format_comment_date(comment["createdAt"])}</time>',
            unsafe_allow_html=True,
        )
        st.text(comment["content"])


def comment_section(article_id):
    section = CommentSection(article_id)
    section.ensure_loaded()

    st.subheader(comment_heading(len(section.comments)))

    if current_session() is not None:
        if section.error:
            st.markdown(f'<div class="quill-error">{html.escape(section.error)}</div>', unsafe_allow_html=True)
        st.text_area("Comment", key=section.draft_key, placeholder="Add to the discussion", label_visibility="collapsed")
        st.button(
            "Posting..." if section.submitting else "Reply",
            key=f"comment_reply_{article_id}",
            disabled=not section.can_submit,
            on_click=section.submit,
        )

    for comment in section.comments:
        render_comment(comment)
