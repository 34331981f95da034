from datetime import timedelta
from typing import Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

from oj.db.models import DEFAULT_JUDGE_NUM, DEFAULT_TIME_LIMIT, DEFAULT_MEMORY_LIMIT_KB


def _positive_duration(value: timedelta) -> timedelta:
    if value <= timedelta(0):
        raise ValueError("time limit must be a positive duration")
    return value


# numbers are read as seconds, strings as ISO 8601 durations
TimeLimit = Annotated[timedelta, AfterValidator(_positive_duration)]


class ProblemBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProblemCreate(ProblemBase):
    title: str = Field(min_length=1, max_length=64)
    description: Optional[str] = None
    judge_num: int = Field(default=DEFAULT_JUDGE_NUM, ge=0)
    time_limit: TimeLimit = DEFAULT_TIME_LIMIT
    memory_limit: int = Field(default=DEFAULT_MEMORY_LIMIT_KB, gt=0)
    owner_id: Optional[int] = None


class ProblemUpdate(ProblemBase):
    title: Optional[str] = Field(default=None, min_length=1, max_length=64)
    description: Optional[str] = None
    judge_num: Optional[int] = Field(default=None, ge=0)
    time_limit: Optional[TimeLimit] = None
    memory_limit: Optional[int] = Field(default=None, gt=0)
    owner_id: Optional[int] = None

    model_config = ConfigDict(extra="forbid")


class ProblemPublic(ProblemBase):
    id: int
    title: str
    description: Optional[str] = None
    judge_num: int
    time_limit: timedelta
    memory_limit: int
    owner_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)
