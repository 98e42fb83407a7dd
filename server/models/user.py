# server/models/user.py

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from . import Base


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Database model for blog users.
    Email is the natural key; password holds a bcrypt hash, never the plaintext.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    image = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    articles = relationship("Article", back_populates="author")
    comments = relationship("Comment", back_populates="author")
