from datetime import date
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Authority(IntEnum):
    """Tiers observed in seed data. The stores never interpret them."""
    TOURIST = 0
    USER = 10
    JUDGER = 20
    ADMIN = 30


class AccountBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccountCreate(AccountBase):
    avatar: Optional[str] = None
    account: str = Field(min_length=1, max_length=32)
    password: str = Field(min_length=1, max_length=64)
    auth: int


class AccountUpdate(AccountBase):
    avatar: Optional[str] = None
    account: Optional[str] = Field(default=None, min_length=1, max_length=32)
    password: Optional[str] = Field(default=None, min_length=1, max_length=64)
    auth: Optional[int] = None

    model_config = ConfigDict(extra="forbid")


class AccountPublic(AccountBase):
    id: int
    avatar: Optional[str] = None
    account: str
    join_time: date
    auth: int

    model_config = ConfigDict(from_attributes=True)
