"""
Blocking between users.

A block is a directed (blocker -> blocked) row in ``user_blocks``. Creating
or removing one also keeps the denormalised counters on ``users`` in step
and flips the status of the pair's direct chat channel. Every mutation is
committed as a single transaction.
"""
from typing import List, Optional

from sqlalchemy import and_, case, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.logging import get_logger
from app.models.chat_channel import ChatChannel
from app.models.user import User
from app.models.user_block import UserBlock

logger = get_logger(__name__)


NOT_BLOCKING = "not-blocking"
BLOCKING = "blocking"
BLOCKED = "blocked"
UNBLOCKED = "unblocked"
NOT_BLOCKING_ANYONE = "not-blocking-anyone"


# --------------------------------------------------
# ERRORS
# --------------------------------------------------
class BlockError(Exception):
    status_code = 400
    detail = "Block request failed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


class NotAuthenticated(BlockError):
    status_code = 401
    detail = "not-logged-in"


class UserNotFound(BlockError):
    status_code = 404
    detail = "User not found"


class SelfBlockError(BlockError):
    status_code = 422
    detail = "You cannot block yourself"


# --------------------------------------------------
# QUERIES
# --------------------------------------------------
def _require_user(user: Optional[User]) -> User:
    if user is None:
        raise NotAuthenticated()
    return user


def _get_block(db: Session, blocker_id: str, blocked_id: str) -> Optional[UserBlock]:
    return (
        db.query(UserBlock)
        .filter_by(blocker_id=blocker_id, blocked_id=blocked_id)
        .first()
    )


def is_blocked(db: Session, user_a_id: str, user_b_id: str) -> bool:
    """
    Returns True if either user has blocked the other.
    """
    return (
        db.query(UserBlock.id)
        .filter(
            or_(
                and_(
                    UserBlock.blocker_id == user_a_id,
                    UserBlock.blocked_id == user_b_id,
                ),
                and_(
                    UserBlock.blocker_id == user_b_id,
                    UserBlock.blocked_id == user_a_id,
                ),
            )
        )
        .first()
        is not None
    )


def direct_channel_slug(user_a: User, user_b: User) -> str:
    return "/".join(sorted([user_a.username, user_b.username]))


def find_direct_channel(db: Session, user_a: User, user_b: User) -> Optional[ChatChannel]:
    """
    Direct channels are keyed by both usernames; either ordering is accepted.
    """
    slugs = [
        f"{user_a.username}/{user_b.username}",
        f"{user_b.username}/{user_a.username}",
    ]
    return (
        db.query(ChatChannel)
        .filter(
            ChatChannel.channel_type == "direct",
            ChatChannel.slug.in_(slugs),
        )
        .first()
    )


def list_blocked_users(db: Session, blocker: Optional[User]) -> List[User]:
    blocker = _require_user(blocker)

    return (
        db.query(User)
        .join(UserBlock, UserBlock.blocked_id == User.id)
        .filter(UserBlock.blocker_id == blocker.id)
        .order_by(UserBlock.created_at.desc(), UserBlock.id.desc())
        .all()
    )


def block_status(db: Session, blocker: Optional[User], blocked_id: str) -> str:
    blocker = _require_user(blocker)

    if _get_block(db, blocker.id, blocked_id):
        return BLOCKING
    return NOT_BLOCKING


# --------------------------------------------------
# MUTATIONS
# --------------------------------------------------
def _decremented(column):
    # Counters never go below zero
    return case((column > 0, column - 1), else_=0)


def create_block(db: Session, blocker: Optional[User], blocked_id: str) -> str:
    blocker = _require_user(blocker)

    if blocked_id == blocker.id:
        raise SelfBlockError()

    blocked = db.query(User).filter(User.id == blocked_id).first()
    if not blocked:
        raise UserNotFound()

    # Already blocked -> no-op
    if _get_block(db, blocker.id, blocked.id):
        logger.info(
            "Block already present",
            extra={"blocker_id": blocker.id, "blocked_id": blocked.id, "result": BLOCKED},
        )
        return BLOCKED

    try:
        db.add(
            UserBlock(
                blocker_id=blocker.id,
                blocked_id=blocked.id,
                config="default",
            )
        )

        blocker.blocking_others_count = User.blocking_others_count + 1
        blocked.blocked_by_count = User.blocked_by_count + 1

        channel = find_direct_channel(db, blocker, blocked)
        if channel:
            channel.status = "blocked"

        db.commit()

    except IntegrityError:
        db.rollback()
        # Lost a race against an identical request
        if _get_block(db, blocker.id, blocked.id):
            return BLOCKED
        raise

    except Exception:
        db.rollback()
        raise

    logger.info(
        "User blocked",
        extra={
            "blocker_id": blocker.id,
            "blocked_id": blocked.id,
            "chat_channel_id": channel.id if channel else None,
            "result": BLOCKED,
        },
    )
    return BLOCKED


def remove_block(db: Session, blocker: Optional[User], blocked_id: str) -> str:
    blocker = _require_user(blocker)

    blocks_anyone = (
        db.query(UserBlock.id)
        .filter(UserBlock.blocker_id == blocker.id)
        .first()
        is not None
    )
    if not blocks_anyone:
        return NOT_BLOCKING_ANYONE

    block = _get_block(db, blocker.id, blocked_id)
    if block is None:
        return UNBLOCKED

    blocked = block.blocked

    try:
        db.delete(block)

        blocker.blocking_others_count = _decremented(User.blocking_others_count)
        blocked.blocked_by_count = _decremented(User.blocked_by_count)

        channel = find_direct_channel(db, blocker, blocked)

        # A block in the other direction keeps the channel closed
        if (
            channel
            and channel.status == "blocked"
            and not _get_block(db, blocked.id, blocker.id)
        ):
            channel.status = "active"

        db.commit()

    except Exception:
        db.rollback()
        raise

    logger.info(
        "User unblocked",
        extra={
            "blocker_id": blocker.id,
            "blocked_id": blocked.id,
            "chat_channel_id": channel.id if channel else None,
            "result": UNBLOCKED,
        },
    )
    return UNBLOCKED
