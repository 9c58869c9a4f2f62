# tests/test_voting_coordinator.py
"""Ledger/counter consistency of the voting coordinator."""

from __future__ import annotations

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.exc import OperationalError

from chow.core.errors import JointNotFoundError, PersistenceError
from chow.core.security import hash_password
from chow.db.session import Database
from chow.models import Joint, Role, User, Vote, VoteDirection
from chow.repositories.joint_repo import JointRepository
from chow.repositories.vote_repo import VoteRepository
from chow.services.voting import VoteApplied, VoteUnchanged, VotingCoordinator


class _Cancelled(BaseException):
    """Stands in for a cancellation delivered mid-transaction."""


def _ledger_rows(db_session, user_id, joint_id) -> list[Vote]:
    return list(
        db_session.scalars(
            select(Vote).where(Vote.user_id == user_id, Vote.joint_id == joint_id)
        )
    )


def _counters(db_session, joint_id) -> tuple[int, int]:
    joint = db_session.get(Joint, joint_id, populate_existing=True)
    return joint.upvotes, joint.downvotes


@pytest.mark.parametrize("direction", [VoteDirection.UP, VoteDirection.DOWN])
def test_first_vote_writes_one_row_and_bumps_one_counter(db_session, test_user, test_joint, direction):
    coordinator = VotingCoordinator(db_session)

    result = coordinator.apply_vote(test_user.id, test_joint.id, direction)

    assert isinstance(result, VoteApplied)
    rows = _ledger_rows(db_session, test_user.id, test_joint.id)
    assert len(rows) == 1
    assert rows[0].direction == direction
    expected = (1, 0) if direction is VoteDirection.UP else (0, 1)
    assert _counters(db_session, test_joint.id) == expected
    assert (result.joint.upvotes, result.joint.downvotes) == expected


def test_repeated_vote_is_unchanged(db_session, test_user, test_joint):
    coordinator = VotingCoordinator(db_session)
    first = coordinator.apply_vote(test_user.id, test_joint.id, VoteDirection.UP)
    assert isinstance(first, VoteApplied)
    updated_at = first.vote.updated_at

    second = coordinator.apply_vote(test_user.id, test_joint.id, VoteDirection.UP)

    assert isinstance(second, VoteUnchanged)
    assert second.vote.direction == VoteDirection.UP
    rows = _ledger_rows(db_session, test_user.id, test_joint.id)
    assert len(rows) == 1
    assert rows[0].updated_at == updated_at
    assert _counters(db_session, test_joint.id) == (1, 0)


def test_flip_moves_count_between_counters(db_session, test_user, test_joint):
    coordinator = VotingCoordinator(db_session)
    baseline = _counters(db_session, test_joint.id)

    coordinator.apply_vote(test_user.id, test_joint.id, VoteDirection.UP)
    result = coordinator.apply_vote(test_user.id, test_joint.id, VoteDirection.DOWN)

    assert isinstance(result, VoteApplied)
    assert _counters(db_session, test_joint.id) == (baseline[0], baseline[1] + 1)
    rows = _ledger_rows(db_session, test_user.id, test_joint.id)
    assert len(rows) == 1
    assert rows[0].direction == VoteDirection.DOWN


def test_counters_match_ledger_across_users(db_session, test_user, other_user, moderator_user, test_joint):
    coordinator = VotingCoordinator(db_session)
    coordinator.apply_vote(test_user.id, test_joint.id, VoteDirection.UP)
    coordinator.apply_vote(other_user.id, test_joint.id, VoteDirection.UP)
    coordinator.apply_vote(moderator_user.id, test_joint.id, VoteDirection.DOWN)
    coordinator.apply_vote(other_user.id, test_joint.id, VoteDirection.DOWN)
    coordinator.apply_vote(test_user.id, test_joint.id, VoteDirection.UP)

    ledger = VoteRepository(db_session)
    ups = ledger.count_for_joint(test_joint.id, VoteDirection.UP)
    downs = ledger.count_for_joint(test_joint.id, VoteDirection.DOWN)
    assert _counters(db_session, test_joint.id) == (ups, downs) == (1, 2)


def test_vote_on_missing_joint(db_session, test_user):
    coordinator = VotingCoordinator(db_session)
    with pytest.raises(JointNotFoundError):
        coordinator.apply_vote(test_user.id, uuid.uuid4(), VoteDirection.UP)
    assert db_session.scalar(select(func.count()).select_from(Vote)) == 0


def test_store_failure_rolls_back_the_vote(db_session, test_user, test_joint, monkeypatch):
    def _fail(self, joint_id, direction, previous):
        raise OperationalError("UPDATE joints", {}, Exception("connection lost"))

    monkeypatch.setattr(JointRepository, "adjust_votes", _fail)
    coordinator = VotingCoordinator(db_session)

    with pytest.raises(PersistenceError):
        coordinator.apply_vote(test_user.id, test_joint.id, VoteDirection.UP)

    assert _ledger_rows(db_session, test_user.id, test_joint.id) == []
    assert _counters(db_session, test_joint.id) == (0, 0)


def test_cancelled_vote_leaves_no_partial_state(db_session, test_user, test_joint, monkeypatch):
    def _cancel(self, joint_id, direction, previous):
        raise _Cancelled

    monkeypatch.setattr(JointRepository, "adjust_votes", _cancel)
    coordinator = VotingCoordinator(db_session)

    with pytest.raises(_Cancelled):
        coordinator.apply_vote(test_user.id, test_joint.id, VoteDirection.UP)

    assert _ledger_rows(db_session, test_user.id, test_joint.id) == []


def test_upsert_on_unsupported_dialect_is_a_persistence_error():
    session = Mock()
    session.get_bind.return_value.dialect.name = "mysql"

    with pytest.raises(PersistenceError):
        VoteRepository(session).upsert(uuid.uuid4(), uuid.uuid4(), VoteDirection.UP)
    session.scalars.assert_not_called()


@pytest.fixture()
def file_database(tmp_path):
    """A file-backed SQLite database, so each worker thread gets its own connection."""
    database = Database(f"sqlite:///{tmp_path / 'votes.db'}", pool_timeout=30.0)
    database.create_tables()
    try:
        yield database
    finally:
        database.drop_tables()
        database.dispose()


def _seed_voters(database, voters):
    """Persist ``voters`` users and one approved joint; return their ids."""
    password_hash = hash_password("concurrent-voter")
    with database.session() as setup:
        users = [
            User(
                email=f"voter{i}@example.com",
                username=f"voter{i:03d}",
                password_hash=password_hash,
                role=Role.USER,
            )
            for i in range(voters)
        ]
        setup.add_all(users)
        setup.flush()
        joint = Joint(
            name="Busy Buka",
            latitude=6.5,
            longitude=3.3,
            is_approved=True,
            creator_id=users[0].id,
        )
        setup.add(joint)
        setup.commit()
        return [user.id for user in users], joint.id


def _vote_concurrently(database, user_ids, joint_id, direction):
    start = threading.Barrier(len(user_ids))

    def _vote(user_id):
        with database.session() as session:
            start.wait()
            return VotingCoordinator(session).apply_vote(user_id, joint_id, direction)

    with ThreadPoolExecutor(max_workers=len(user_ids)) as pool:
        return list(pool.map(_vote, user_ids))


def test_concurrent_distinct_voters_lose_no_updates(file_database):
    voters = 8
    user_ids, joint_id = _seed_voters(file_database, voters)

    results = _vote_concurrently(file_database, user_ids, joint_id, VoteDirection.UP)

    assert all(isinstance(result, VoteApplied) for result in results)
    with file_database.session() as check:
        joint = check.get(Joint, joint_id)
        assert joint.upvotes == voters
        assert joint.downvotes == 0
        assert check.scalar(select(func.count()).select_from(Vote)) == voters


def test_concurrent_same_user_votes_count_once(file_database):
    attempts = 8
    user_ids, joint_id = _seed_voters(file_database, 1)

    results = _vote_concurrently(file_database, user_ids * attempts, joint_id, VoteDirection.UP)

    applied = [result for result in results if isinstance(result, VoteApplied)]
    assert len(applied) == 1
    assert all(isinstance(result, (VoteApplied, VoteUnchanged)) for result in results)
    with file_database.session() as check:
        joint = check.get(Joint, joint_id)
        assert (joint.upvotes, joint.downvotes) == (1, 0)
        assert check.scalar(select(func.count()).select_from(Vote)) == 1


def test_file_database_transactions_begin_immediate(file_database):
    statements = []

    @event.listens_for(file_database.engine, "before_cursor_execute")
    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    with file_database.session() as session:
        session.execute(select(Vote)).all()
        session.rollback()

    event.remove(file_database.engine, "before_cursor_execute", _record)
    assert statements[0] == "BEGIN IMMEDIATE"
