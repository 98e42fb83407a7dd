import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from server.main import app


def test_create_article_requires_session(client):
    response = client.post("/api/articles", json={"title": "Hello", "content": "Body"})

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}


@pytest.mark.parametrize("payload", [
    {"title": "", "content": "Body"},
    {"title": "Hello", "content": "   "},
    {},
])
def test_create_article_requires_title_and_content(client, auth_headers, payload):
    response = client.post("/api/articles", json=payload, headers=auth_headers())

    assert response.status_code == 400
    assert response.json() == {"message": "Title and content are required"}


def test_create_and_get_article(client, article):
    assert article["title"] == "Hello"
    assert article["commentCount"] == 0
    assert article["author"]["name"] == "Author"
    assert "password" not in article["author"]

    response = client.get(f"/api/articles/{article['id']}")

    assert response.status_code == 200
    assert response.json()["article"]["id"] == article["id"]


def test_get_missing_article(client):
    response = client.get("/api/articles/404")

    assert response.status_code == 404
    assert response.json() == {"message": "Article not found"}


def test_list_articles(client, article, auth_headers):
    client.post(
        f"/api/articles/{article['id']}/comments",
        json={"content": "Nice"},
        headers=auth_headers(email="reader@example.com", name="Reader"),
    )

    response = client.get("/api/articles")

    assert response.status_code == 200
    articles = response.json()["articles"]
    assert len(articles) == 1
    assert articles[0]["commentCount"] == 1


def test_list_comments_empty(client, article):
    response = client.get(f"/api/articles/{article['id']}/comments")

    assert response.status_code == 200
    assert response.json() == {"comments": []}


def test_list_comments_missing_article(client):
    response = client.get("/api/articles/404/comments")

    assert response.status_code == 404
    assert response.json() == {"message": "Article not found"}


def test_post_comment_requires_session(client, article):
    response = client.post(f"/api/articles/{article['id']}/comments", json={"content": "Hi"})

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}


def test_post_comment_rejects_blank_content(client, article, auth_headers):
    response = client.post(
        f"/api/articles/{article['id']}/comments",
        json={"content": "  \n "},
        headers=auth_headers(),
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Content is required"}


def test_post_comment_missing_article(client, auth_headers):
    response = client.post("/api/articles/404/comments", json={"content": "Hi"}, headers=auth_headers())

    assert response.status_code == 404


def test_post_comment(client, article, auth_headers):
    headers = auth_headers(email="reader@example.com", name="Reader")

    response = client.post(f"/api/articles/{article['id']}/comments", json={"content": "  Great read  "}, headers=headers)

    assert response.status_code == 201
    comment = response.json()["comment"]
    assert comment["content"] == "Great read"
    assert set(comment) == {"id", "content", "createdAt", "author"}
    assert set(comment["author"]) == {"id", "name", "email", "image"}
    assert comment["author"]["name"] == "Reader"


def test_comments_listed_newest_first(client, article, auth_headers):
    headers = auth_headers()
    for text in ("first", "second", "third"):
        client.post(f"/api/articles/{article['id']}/comments", json={"content": text}, headers=headers)

    response = client.get(f"/api/articles/{article['id']}/comments")

    assert [c["content"] for c in response.json()["comments"]] == ["third", "second", "first"]


def test_post_comment_database_failure_is_generic(client, article, auth_headers, mocker):
    headers = auth_headers()
    mocker.patch(
        "server.core.store.create_comment",
        side_effect=OperationalError("INSERT INTO comments", {}, Exception("database is locked")),
    )
    failing_client = TestClient(app, raise_server_exceptions=False)

    response = failing_client.post(
        f"/api/articles/{article['id']}/comments", json={"content": "Nice"}, headers=headers
    )

    assert response.status_code == 500
    assert response.json() == {"message": "Something went wrong"}
