# src/chow/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import Pagination
from .complaint import ComplaintCreate, ComplaintResponse
from .joint import JointCreate, JointResponse, JointUpdate
from .user import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from .vote import MyVoteResponse, VoteCreate, VoterResponse, VoteResultResponse

__all__ = [
    "Pagination",
    "ComplaintCreate", "ComplaintResponse",
    "JointCreate", "JointResponse", "JointUpdate",
    "LoginRequest", "LoginResponse", "RegisterRequest", "UserResponse",
    "MyVoteResponse", "VoteCreate", "VoterResponse", "VoteResultResponse",
]
