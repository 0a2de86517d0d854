import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime, Integer
from sqlalchemy.orm import relationship

from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(
        String,
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        index=True
    )

    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    # Denormalised from user_blocks
    blocking_others_count = Column(Integer, nullable=False, default=0)
    blocked_by_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)

    blocks_given = relationship(
        "UserBlock",
        back_populates="blocker",
        foreign_keys="UserBlock.blocker_id",
        cascade="all, delete-orphan",
    )

    blocks_received = relationship(
        "UserBlock",
        back_populates="blocked",
        foreign_keys="UserBlock.blocked_id",
        cascade="all, delete-orphan",
    )

    chat_channel_memberships = relationship(
        "ChatChannelMembership",
        back_populates="user",
        cascade="all, delete-orphan",
    )
