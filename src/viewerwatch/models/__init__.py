"""SQLAlchemy ORM models."""

from viewerwatch.models.base import Base
from viewerwatch.models.group import Group
from viewerwatch.models.channel import Channel
from viewerwatch.models.metric import Metric

__all__ = [
    "Base",
    "Group",
    "Channel",
    "Metric",
]
