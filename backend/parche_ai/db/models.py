"""
Database models -- SQLAlchemy ORM definitions.
Single table: plans (the recommendation catalog).
Compatible with both PostgreSQL and SQLite.
"""

from sqlalchemy import Column, Float, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Plan(Base):
    """
    A recommendable plan (venue or event).
    Tags are stored pipe-delimited: "Hoy | Destacado".
    """
    __tablename__ = "plans"

    id = Column(Text, primary_key=True, index=True)
    name = Column(Text, nullable=False, index=True)
    category = Column(Text, index=True, default="")
    description = Column(Text, default="")
    rating = Column(Float, nullable=True)
    tags = Column(Text, default="")
