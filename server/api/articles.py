# server/api/articles.py

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from server.database import get_db
from server.models.user import User
from server.core import store
from server.api.auth import get_current_user
from server.api.schemas import (
    ArticleCreateRequest,
    CommentCreateRequest,
    ArticleOut,
    CommentOut,
    dump,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/articles", tags=["articles"])


def article_not_found():
    return JSONResponse(status_code=404, content={"message": "Article not found"})


def serialize_article(article, comment_count: int) -> dict:
    out = ArticleOut.model_validate(article).model_copy(update={"comment_count": comment_count})
    return dump(out)


# -------------------------------
# Articles
# -------------------------------

@router.get("")
def list_articles(db: Session = Depends(get_db)):
    rows = store.list_articles(db)
    return {"articles": [serialize_article(article, n) for article, n in rows]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_article(req: ArticleCreateRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    title = req.title.strip()
    content = req.content.strip()
    if not title or not content:
        return JSONResponse(status_code=400, content={"message": "Title and content are required"})

    article = store.create_article(db, user.id, title, content)
    logger.info("User %s published article %s", user.id, article.id)
    return {"article": serialize_article(article, 0)}


@router.get("/{article_id}")
def get_article(article_id: int, db: Session = Depends(get_db)):
    article = store.get_article(db, article_id)
    if article is None:
        return article_not_found()
    return {"article": serialize_article(article, store.count_comments(db, article_id))}


# -------------------------------
# Comments
# -------------------------------

@router.get("/{article_id}/comments")
def list_comments(article_id: int, db: Session = Depends(get_db)):
    result = store.list_comments(db, article_id)
    if isinstance(result, store.ArticleMissing):
        return article_not_found()
    return {"comments": [dump(CommentOut.model_validate(c)) for c in result]}


@router.post("/{article_id}/comments", status_code=status.HTTP_201_CREATED)
def create_comment(
    article_id: int,
    req: CommentCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    content = req.content.strip()
    if not content:
        return JSONResponse(status_code=400, content={"message": "Content is required"})

    result = store.create_comment(db, article_id, user.id, content)
    if isinstance(result, store.ArticleMissing):
        return article_not_found()

    logger.info("User %s commented on article %s", user.id, article_id)
    return {"comment": dump(CommentOut.model_validate(result.comment))}
