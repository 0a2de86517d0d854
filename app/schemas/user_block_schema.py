from pydantic import BaseModel, model_validator
from typing import Any, Literal


# --------------------------------------------------
# CREATE BLOCK
# --------------------------------------------------
class UserBlockCreate(BaseModel):
    blocked_id: str

    @model_validator(mode="before")
    @classmethod
    def unwrap_user_block(cls, data: Any) -> Any:
        # Accept {"user_block": {"blocked_id": ...}} as well as the flat form
        if isinstance(data, dict) and isinstance(data.get("user_block"), dict):
            return data["user_block"]
        return data


# --------------------------------------------------
# RESULT ENVELOPES
# --------------------------------------------------
class BlockStatusOut(BaseModel):
    result: Literal["not-blocking", "blocking"]


class BlockCreateOut(BaseModel):
    result: Literal["blocked"]


class BlockRemoveOut(BaseModel):
    result: Literal["unblocked", "not-blocking-anyone"]


# --------------------------------------------------
# BLOCKED USER (used in GET /user_blocks)
# --------------------------------------------------
class BlockedUserOut(BaseModel):
    id: str
    username: str

    class Config:
        from_attributes = True
