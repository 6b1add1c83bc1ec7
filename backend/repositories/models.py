"""
SQLAlchemy ORM models for persistence.
"""
from sqlalchemy import Column, Integer, JSON, String

from db import Base


class BookORM(Base):
    __tablename__ = "books"

    # Insertion order; the public id is generated by the application.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    title = Column(String, nullable=True)
    author = Column(String, nullable=True)
    extra = Column(JSON, nullable=True)
