# app/ui/articles.py

import streamlit as st
from app.providers import current_session
from app.services.api import Failure, create_article, get_article, list_articles
from app.ui.comments import comment_section, format_comment_date, author_display_name, invalidate_comments


def articles_page():
    articles = list_articles()
    if isinstance(articles, Failure):
        st.error(articles.message)
        return

    if not articles.data:
        st.info("No articles yet.")
        return

    with st.sidebar:
        st.markdown("## Articles")
        for article in articles.data:
            if st.button(article["title"], key=f"open_{article['id']}"):
                st.session_state["article_id"] = article["id"]
                invalidate_comments()
                st.rerun()

    article_id = st.session_state.get("article_id") or articles.data[0]["id"]
    article_page(article_id)


def article_page(article_id):
    result = get_article(article_id)
    if isinstance(result, Failure):
        st.error(result.message)
        st.session_state.pop("article_id", None)
        return

    article = result.data
    st.title(article["title"])
    st.caption(
        f"{author_display_name(article['author'])} · {format_comment_date(article['createdAt'])}"
        f" · {article['commentCount']} comments"
    )
    st.markdown(article["content"])

    st.divider()
    comment_section(article["id"])


def write_page():
    st.title("New article")

    session = current_session()
    if session is None:
        st.warning("Sign in to publish an article.")
        return

    with st.form("article_form", clear_on_submit=False):
        title = st.text_input("Title")
        content = st.text_area("Content", height=300)
        submitted = st.form_submit_button("Publish")

    if submitted:
        with st.spinner("Publishing..."):
            result = create_article(session.access_token, title, content)
        if isinstance(result, Failure):
            st.error(result.message)
            return
        st.session_state["article_id"] = result.data["id"]
        st.session_state["page"] = "articles"
        st.rerun()
