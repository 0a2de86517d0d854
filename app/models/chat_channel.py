from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


CHANNEL_TYPES = ("direct", "open", "invite_only")
CHANNEL_STATUSES = ("active", "inactive", "blocked")


class ChatChannel(Base):
    __tablename__ = "chat_channels"

    id = Column(Integer, primary_key=True, index=True)

    # direct | open | invite_only
    channel_type = Column(String, nullable=False, default="direct")

    # Direct channels: "<username>/<username>"
    slug = Column(String, unique=True, nullable=False, index=True)

    channel_name = Column(String, nullable=True)

    # active | inactive | blocked
    status = Column(
        String,
        nullable=False,
        default="active",
        index=True,
    )

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    memberships = relationship(
        "ChatChannelMembership",
        back_populates="chat_channel",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index(
            "ix_chat_channels_type_status",
            "channel_type",
            "status",
        ),
    )
