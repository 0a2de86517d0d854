from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.core.user_blocking import (
    direct_channel_slug,
    find_direct_channel,
    is_blocked,
)
from app.database import get_db
from app.logging import get_logger
from app.models.chat_channel import ChatChannel
from app.models.chat_channel_membership import ChatChannelMembership
from app.models.user import User
from app.schemas.chat_channel_schema import ChatChannelOut, DirectChannelCreate


router = APIRouter(prefix="/chat_channels", tags=["Chat Channels"])

logger = get_logger(__name__)


# --------------------------------------------------
# OPEN (GET OR CREATE) DIRECT CHANNEL
# --------------------------------------------------
@router.post("/direct", response_model=ChatChannelOut)
def open_direct_channel(
    payload: DirectChannelCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload.user_id == current_user.id:
        raise HTTPException(400, "Cannot open a direct channel with yourself")

    other = db.query(User).filter(User.id == payload.user_id).first()
    if not other:
        raise HTTPException(404, "User not found")

    existing = find_direct_channel(db, current_user, other)
    if existing:
        return existing

    channel = ChatChannel(
        channel_type="direct",
        slug=direct_channel_slug(current_user, other),
        channel_name=f"{current_user.username} and {other.username}",
        status="blocked" if is_blocked(db, current_user.id, other.id) else "active",
    )
    channel.memberships = [
        ChatChannelMembership(user_id=current_user.id),
        ChatChannelMembership(user_id=other.id),
    ]

    db.add(channel)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = find_direct_channel(db, current_user, other)
        if existing:
            return existing
        raise

    db.refresh(channel)

    logger.info(
        "Direct channel opened",
        extra={"chat_channel_id": channel.id, "status": channel.status},
    )
    return channel


# --------------------------------------------------
# MY CHANNELS
# --------------------------------------------------
@router.get("/mine", response_model=List[ChatChannelOut])
def get_my_channels(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return (
        db.query(ChatChannel)
        .join(
            ChatChannelMembership,
            ChatChannelMembership.chat_channel_id == ChatChannel.id,
        )
        .filter(ChatChannelMembership.user_id == current_user.id)
        .order_by(ChatChannel.updated_at.desc(), ChatChannel.id.desc())
        .all()
    )
