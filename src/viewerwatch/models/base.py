"""Declarative base shared by the group, channel and metric models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all viewerwatch ORM models."""
