from pydantic import BaseModel
from typing import Optional
from datetime import datetime


# --------------------------------------------------
# OPEN DIRECT CHANNEL
# --------------------------------------------------
class DirectChannelCreate(BaseModel):
    user_id: str


# --------------------------------------------------
# CHANNEL OUT
# --------------------------------------------------
class ChatChannelOut(BaseModel):
    id: int
    channel_type: str
    slug: str
    channel_name: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
