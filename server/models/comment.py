# server/models/comment.py

from datetime import datetime
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from . import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.now, index=True, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    article_id = Column(Integer, ForeignKey("articles.id"), index=True, nullable=False)

    author = relationship("User", back_populates="comments")
    article = relationship("Article", back_populates="comments")
