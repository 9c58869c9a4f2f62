# src/chow/services/proximity.py
"""Radius-capped nearby search over approved joints."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from chow.core.errors import PersistenceError, RadiusExceededError, ValidationFailedError
from chow.core.settings import PROTOCOL_MAX_RADIUS_METERS
from chow.models.joint import Joint
from chow.repositories.joint_repo import JointRepository
from chow.utils.geo import Coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NearbyJoint:
    joint: Joint
    distance_m: float


class ProximityPlanner:
    """Validate a radius query against the cap, then run it against the store."""

    def __init__(self, joints: JointRepository, max_radius_m: float) -> None:
        if max_radius_m <= 0 or max_radius_m > PROTOCOL_MAX_RADIUS_METERS:
            raise ValueError(f"max_radius_m must be in (0, {PROTOCOL_MAX_RADIUS_METERS:g}]")
        self.joints = joints
        self.max_radius_m = max_radius_m

    def find_nearby(
        self,
        center: Coordinate,
        radius_m: float,
        offset: int,
        limit: int,
    ) -> list[NearbyJoint]:
        """Return approved joints within ``radius_m`` of ``center``, nearest first.

        Raises:
            ValidationFailedError: If the radius is not positive.
            RadiusExceededError: If the radius is above the configured cap. No
                query is issued in that case.
        """
        if radius_m <= 0:
            raise ValidationFailedError("radius", "radius must be greater than 0")
        if radius_m > self.max_radius_m:
            logger.info("Nearby search rejected: radius %.1fm over cap %.1fm", radius_m, self.max_radius_m)
            raise RadiusExceededError(radius_m, self.max_radius_m)

        try:
            matches = self.joints.list_within_radius(center, radius_m, offset, limit)
        except SQLAlchemyError as err:
            logger.exception("Nearby search failed")
            raise PersistenceError() from err
        return [NearbyJoint(joint=joint, distance_m=distance) for joint, distance in matches]
