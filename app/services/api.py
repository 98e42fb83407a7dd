# app/services/api.py

import logging
from dataclasses import dataclass
from typing import Any
import requests
from app.config import FASTAPI_URL, REQUEST_TIMEOUT


logger = logging.getLogger(__name__)

UNREACHABLE = "Could not reach the server"


@dataclass
class Success:
    data: Any
    status: int = 200


@dataclass
class Failure:
    message: str
    status: int | None = None


def _auth_headers(access_token):
    return {"Authorization": f"Bearer {access_token}"} if access_token else {}


def _call(method, path, **kwargs) -> Success | Failure:
    """
    Sends a request to the backend and folds the outcome into Success/Failure.
    Network errors, undecodable bodies and non-2xx statuses all become Failure.
    """
    try:
        res = requests.request(method, f"{FASTAPI_URL}{path}", timeout=REQUEST_TIMEOUT, **kwargs)
    except requests.RequestException as e:
        logger.warning("%s %s failed: %s", method, path, e)
        return Failure(UNREACHABLE)

    try:
        body = res.json()
    except ValueError:
        body = None

    if not res.ok:
        message = body.get("message") if isinstance(body, dict) else None
        return Failure(message or f"Error: Status {res.status_code}", res.status_code)
    if body is None:
        return Failure("Invalid response from server", res.status_code)
    return Success(body, res.status_code)


def _field(result, key) -> Success | Failure:
    if isinstance(result, Failure):
        return result
    if not isinstance(result.data, dict) or key not in result.data:
        return Failure("Invalid response from server", result.status)
    return Success(result.data[key], result.status)


# -------------------------------
# Authentication-related functions
# -------------------------------

def register_user(name, email, password):
    """
    Creates a new account. Success carries the created user.
    """
    payload = {"name": name or None, "email": email, "password": password}
    return _field(_call("POST", "/api/auth/register", json=payload), "user")


def login_user(email, password):
    """
    Logs in a user and returns the access token.
    """
    result = _call(
        "POST",
        "/api/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    return _field(result, "access_token")


def get_session(access_token):
    """
    Retrieves the session (user and expiry) for an access token.
    """
    return _call("GET", "/api/auth/session", headers=_auth_headers(access_token))


# -------------------------
# Articles
# -------------------------

def list_articles():
    return _field(_call("GET", "/api/articles"), "articles")


def get_article(article_id):
    return _field(_call("GET", f"/api/articles/{article_id}"), "article")


def create_article(access_token, title, content):
    result = _call(
        "POST",
        "/api/articles",
        json={"title": title, "content": content},
        headers=_auth_headers(access_token),
    )
    return _field(result, "article")


# -------------------------
# Comments
# -------------------------

def list_comments(article_id):
    """
    Lists the comments of an article, newest first.
    """
    return _field(_call("GET", f"/api/articles/{article_id}/comments"), "comments")


def create_comment(access_token, article_id, content):
    """
    Posts a comment as the session user. Success carries the created comment.
    """
    result = _call(
        "POST",
        f"/api/articles/{article_id}/comments",
        json={"content": content},
        headers=_auth_headers(access_token),
    )
    return _field(result, "comment")
