# src/chow/services/__init__.py
"""Business logic services for the Chow application."""

from .auth import AuthenticatedIdentity, AuthService, TokenService, get_token_service
from .complaint_service import ComplaintService
from .joint_service import JointService
from .proximity import NearbyJoint, ProximityPlanner
from .voting import VoteApplied, VoteResult, VoteUnchanged, VotingCoordinator

__all__ = [
    "AuthenticatedIdentity",
    "AuthService",
    "TokenService",
    "get_token_service",
    "ComplaintService",
    "JointService",
    "NearbyJoint",
    "ProximityPlanner",
    "VoteApplied",
    "VoteResult",
    "VoteUnchanged",
    "VotingCoordinator",
]
