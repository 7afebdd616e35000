"""Garden (device record) model."""

from typing import Optional

from sqlmodel import Field, SQLModel


class Garden(SQLModel, table=True):
    __tablename__ = "gardens"

    serial: str = Field(primary_key=True, max_length=24)
    claimed_by: Optional[str] = Field(default=None, index=True)  # account id
    nickname: Optional[str] = None
    last_token: Optional[str] = None
    last_token_time: Optional[int] = None  # unix seconds, written with last_token
    last_sync_time: Optional[int] = None  # unix seconds, written by the device
