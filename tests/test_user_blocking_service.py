import pytest

from app.core import user_blocking
from app.core.user_blocking import (
    NotAuthenticated,
    SelfBlockError,
    UserNotFound,
    block_status,
    create_block,
    is_blocked,
    list_blocked_users,
    remove_block,
)
from app.models.user_block import UserBlock


@pytest.mark.parametrize(
    "operation",
    [
        lambda db: block_status(db, None, "someone"),
        lambda db: create_block(db, None, "someone"),
        lambda db: remove_block(db, None, "someone"),
        lambda db: list_blocked_users(db, None),
    ],
)
def test_anonymous_caller_is_rejected(db, operation):
    with pytest.raises(NotAuthenticated) as excinfo:
        operation(db)

    assert excinfo.value.status_code == 401
    assert excinfo.value.detail == "not-logged-in"


def test_create_rejects_self_block(db, blocker):
    with pytest.raises(SelfBlockError):
        create_block(db, blocker, blocker.id)


def test_create_rejects_unknown_user(db, blocker):
    with pytest.raises(UserNotFound):
        create_block(db, blocker, "does-not-exist")


def test_create_and_status(db, blocker, blocked):
    assert block_status(db, blocker, blocked.id) == "not-blocking"

    assert create_block(db, blocker, blocked.id) == "blocked"

    assert block_status(db, blocker, blocked.id) == "blocking"
    assert block_status(db, blocked, blocker.id) == "not-blocking"


def test_create_is_idempotent(db, blocker, blocked):
    create_block(db, blocker, blocked.id)
    create_block(db, blocker, blocked.id)

    assert db.query(UserBlock).count() == 1
    db.refresh(blocker)
    db.refresh(blocked)
    assert blocker.blocking_others_count == 1
    assert blocked.blocked_by_count == 1


def test_counters_track_rows(db, user_factory):
    alice = user_factory()
    bob = user_factory()
    carol = user_factory()

    create_block(db, alice, bob.id)
    create_block(db, alice, carol.id)
    create_block(db, bob, carol.id)
    remove_block(db, alice, bob.id)

    for user in (alice, bob, carol):
        db.refresh(user)
        assert user.blocking_others_count == (
            db.query(UserBlock).filter_by(blocker_id=user.id).count()
        )
        assert user.blocked_by_count == (
            db.query(UserBlock).filter_by(blocked_id=user.id).count()
        )


def test_remove_without_any_blocks_does_nothing(db, blocker, blocked):
    assert remove_block(db, blocker, blocked.id) == "not-blocking-anyone"

    db.refresh(blocker)
    assert blocker.blocking_others_count == 0


def test_remove_absent_pair_is_a_noop(db, user_factory, block_factory):
    alice = user_factory()
    bob = user_factory()
    carol = user_factory()
    block_factory(alice, bob)

    assert remove_block(db, alice, carol.id) == "unblocked"

    assert db.query(UserBlock).count() == 1
    db.refresh(alice)
    assert alice.blocking_others_count == 1


def test_remove_never_drives_counter_negative(db, blocker, blocked):
    db.add(UserBlock(blocker_id=blocker.id, blocked_id=blocked.id))
    db.commit()

    assert remove_block(db, blocker, blocked.id) == "unblocked"

    db.refresh(blocker)
    db.refresh(blocked)
    assert blocker.blocking_others_count == 0
    assert blocked.blocked_by_count == 0


def test_mutual_block_keeps_channel_blocked(
    db, blocker, blocked, direct_channel_factory
):
    channel = direct_channel_factory(blocker, blocked)

    create_block(db, blocker, blocked.id)
    create_block(db, blocked, blocker.id)
    remove_block(db, blocker, blocked.id)

    db.refresh(channel)
    assert channel.status == "blocked"

    remove_block(db, blocked, blocker.id)

    db.refresh(channel)
    assert channel.status == "active"


def test_remove_does_not_reactivate_inactive_channel(
    db, blocker, blocked, block_factory, direct_channel_factory
):
    block_factory(blocker, blocked)
    channel = direct_channel_factory(blocker, blocked, status="inactive")

    remove_block(db, blocker, blocked.id)

    db.refresh(channel)
    assert channel.status == "inactive"


def test_failed_channel_update_rolls_back_block(db, monkeypatch, blocker, blocked):
    def explode(*_args, **_kwargs):
        raise RuntimeError("channel lookup failed")

    monkeypatch.setattr(user_blocking, "find_direct_channel", explode)

    with pytest.raises(RuntimeError):
        create_block(db, blocker, blocked.id)

    assert db.query(UserBlock).count() == 0
    db.refresh(blocker)
    assert blocker.blocking_others_count == 0


def test_is_blocked_checks_both_directions(db, user_factory, block_factory):
    alice = user_factory()
    bob = user_factory()
    carol = user_factory()
    block_factory(alice, bob)

    assert is_blocked(db, alice.id, bob.id) is True
    assert is_blocked(db, bob.id, alice.id) is True
    assert is_blocked(db, alice.id, carol.id) is False
