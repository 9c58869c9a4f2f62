# src/chow/models/__init__.py
"""SQLAlchemy models for the Chow application."""

from .complaint import Complaint, ComplaintStatus
from .joint import Joint
from .user import Role, User
from .vote import Vote, VoteDirection

__all__ = [
    "Complaint", "ComplaintStatus",
    "Joint",
    "Role", "User",
    "Vote", "VoteDirection",
]
