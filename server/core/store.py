# server/core/store.py

from dataclasses import dataclass
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from server.models.user import User
from server.models.article import Article
from server.models.comment import Comment


# -------------------------------
# Result variants
# -------------------------------

@dataclass
class UserCreated:
    user: User


@dataclass
class EmailTaken:
    email: str


@dataclass
class CommentCreated:
    comment: Comment


@dataclass
class ArticleMissing:
    article_id: int


# -------------------------------
# Users
# -------------------------------

def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def create_user(db: Session, name: str | None, email: str, password_hash: str) -> UserCreated | EmailTaken:
    """
    Insert a user unless the email is already registered.

    The lookup rejects the common case early; the unique constraint on
    users.email settles concurrent registrations that both pass it.
    """
    if find_user_by_email(db, email):
        return EmailTaken(email)

    user = User(name=name, email=email, password=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return EmailTaken(email)

    db.refresh(user)
    return UserCreated(user)


# -------------------------------
# Articles
# -------------------------------

def get_article(db: Session, article_id: int) -> Article | None:
    return (
        db.query(Article)
        .options(joinedload(Article.author))
        .filter(Article.id == article_id)
        .first()
    )


def count_comments(db: Session, article_id: int) -> int:
    return db.query(func.count(Comment.id)).filter(Comment.article_id == article_id).scalar() or 0


def list_articles(db: Session) -> list[tuple[Article, int]]:
    counts = (
        db.query(Comment.article_id, func.count(Comment.id).label("n"))
        .group_by(Comment.article_id)
        .subquery()
    )
    rows = (
        db.query(Article, func.coalesce(counts.c.n, 0))
        .options(joinedload(Article.author))
        .outerjoin(counts, Article.id == counts.c.article_id)
        .order_by(Article.created_at.desc(), Article.id.desc())
        .all()
    )
    return [(article, n) for article, n in rows]


def create_article(db: Session, author_id: int, title: str, content: str) -> Article:
    article = Article(title=title, content=content, author_id=author_id)
    db.add(article)
    db.commit()
    db.refresh(article)
    return article


# -------------------------------
# Comments
# -------------------------------

def list_comments(db: Session, article_id: int) -> list[Comment] | ArticleMissing:
    if db.get(Article, article_id) is None:
        return ArticleMissing(article_id)

    return (
        db.query(Comment)
        .options(joinedload(Comment.author))
        .filter(Comment.article_id == article_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )


def create_comment(db: Session, article_id: int, author_id: int, content: str) -> CommentCreated | ArticleMissing:
    if db.get(Article, article_id) is None:
        return ArticleMissing(article_id)

    comment = Comment(content=content, article_id=article_id, author_id=author_id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return CommentCreated(comment)
