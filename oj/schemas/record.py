from datetime import datetime
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from oj.core.config import settings


class RecordStatus(IntEnum):
    PENDING = 10
    JUDGING = 20
    ACCEPTED = 30
    WRONG_ANSWER = 40
    RUNTIME_ERROR = 50
    MEMORY_LIMIT_EXCEEDED = 60
    TIME_LIMIT_EXCEEDED = 70
    COMPILATION_ERROR = 80
    UNKNOWN_ERROR = 90

    @staticmethod
    def is_terminal(value: int) -> bool:
        # codes outside the enum belong to the judge and count as verdicts
        return value not in (RecordStatus.PENDING, RecordStatus.JUDGING)


class Language(IntEnum):
    C = 10
    CPP = 20
    PYTHON3 = 30
    RUST = 40


class RecordBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordCreate(RecordBase):
    account_id: int
    problem_id: int
    language: int
    code: str


class RecordVerdict(RecordBase):
    status: int
    run_time: Optional[int] = Field(default=None, ge=0)


class RecordFilter(RecordBase):
    id: Optional[int] = None
    account_id: Optional[int] = None
    problem_id: Optional[int] = None
    language: Optional[int] = None
    status: Optional[int] = None


class RecordPage(RecordBase):
    page_no: int = Field(default=1, ge=1)
    page_size: int = Field(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)


class RecordPublic(RecordBase):
    id: int
    account_id: int
    problem_id: int
    language: int
    code: str
    submit_time: datetime
    status: int
    run_time: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class AccountRecords(RecordBase):
    account_id: int


class ProblemRecords(RecordBase):
    problem_id: int


class StalePendingQuery(RecordBase):
    timeout_sec: int = Field(default=settings.PENDING_TIMEOUT_SEC, gt=0)
