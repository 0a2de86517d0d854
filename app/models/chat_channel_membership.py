from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base


class ChatChannelMembership(Base):
    __tablename__ = "chat_channel_memberships"

    id = Column(Integer, primary_key=True, index=True)
    chat_channel_id = Column(
        Integer,
        ForeignKey("chat_channels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status = Column(String, default="active")  # active | left
    created_at = Column(DateTime, default=datetime.utcnow)

    chat_channel = relationship("ChatChannel", back_populates="memberships")
    user = relationship("User", back_populates="chat_channel_memberships")

    __table_args__ = (
        UniqueConstraint(
            "chat_channel_id",
            "user_id",
            name="uq_chat_channel_memberships_channel_user",
        ),
    )
