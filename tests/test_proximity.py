# tests/test_proximity.py
"""Tests for the radius-capped proximity planner."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from chow.core.errors import RadiusExceededError, ValidationFailedError
from chow.repositories.joint_repo import JointRepository
from chow.services.proximity import ProximityPlanner
from chow.utils.geo import Coordinate

CENTER = Coordinate(6.5, 3.3)


def test_radius_over_cap_is_rejected_without_querying():
    joints = Mock(spec=JointRepository)
    planner = ProximityPlanner(joints, max_radius_m=2000)

    with pytest.raises(RadiusExceededError) as excinfo:
        planner.find_nearby(CENTER, 2000.5, 0, 10)

    joints.list_within_radius.assert_not_called()
    assert excinfo.value.max_radius_m == 2000


@pytest.mark.parametrize("radius", [0, -5])
def test_non_positive_radius_is_rejected(radius):
    joints = Mock(spec=JointRepository)
    planner = ProximityPlanner(joints, max_radius_m=2000)

    with pytest.raises(ValidationFailedError) as excinfo:
        planner.find_nearby(CENTER, radius, 0, 10)

    assert excinfo.value.field == "radius"
    joints.list_within_radius.assert_not_called()


@pytest.mark.parametrize("cap", [0, 5000.1])
def test_cap_must_stay_within_protocol_ceiling(cap):
    with pytest.raises(ValueError):
        ProximityPlanner(Mock(spec=JointRepository), max_radius_m=cap)


def test_radius_equal_to_cap_is_allowed():
    joints = Mock(spec=JointRepository)
    joints.list_within_radius.return_value = []
    planner = ProximityPlanner(joints, max_radius_m=2000)

    assert planner.find_nearby(CENTER, 2000, 0, 10) == []
    joints.list_within_radius.assert_called_once_with(CENTER, 2000, 0, 10)


def test_joint_at_center_is_found_at_zero_distance(db_session, test_joint):
    planner = ProximityPlanner(JointRepository(db_session), max_radius_m=2000)

    matches = planner.find_nearby(CENTER, 100, 0, 10)

    assert [match.joint.id for match in matches] == [test_joint.id]
    assert matches[0].distance_m == pytest.approx(0.0, abs=1e-6)


def test_results_are_sorted_filtered_and_paged(db_session, make_joint):
    # ~111 m per 0.001 degree of latitude.
    far = make_joint("Far", 6.5 + 0.015, 3.3)       # ~1.67 km
    near = make_joint("Near", 6.5 + 0.001, 3.3)     # ~111 m
    middle = make_joint("Middle", 6.5 + 0.005, 3.3)  # ~556 m
    make_joint("Outside", 6.5 + 0.05, 3.3)           # ~5.6 km
    make_joint("Hidden", 6.5, 3.3, approved=False)
    planner = ProximityPlanner(JointRepository(db_session), max_radius_m=2000)

    everything = planner.find_nearby(CENTER, 2000, 0, 10)
    assert [m.joint.id for m in everything] == [near.id, middle.id, far.id]
    distances = [m.distance_m for m in everything]
    assert distances == sorted(distances)
    assert all(d <= 2000 for d in distances)

    second_page = planner.find_nearby(CENTER, 2000, 1, 1)
    assert [m.joint.id for m in second_page] == [middle.id]


def test_search_across_antimeridian(db_session, make_joint):
    east = make_joint("East Edge", 0.0, 179.9995)
    west = make_joint("West Edge", 0.0, -179.9995)
    planner = ProximityPlanner(JointRepository(db_session), max_radius_m=2000)

    matches = planner.find_nearby(Coordinate(0.0, 179.9999), 500, 0, 10)

    assert {m.joint.id for m in matches} == {east.id, west.id}
