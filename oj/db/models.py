from datetime import datetime, timezone, timedelta

from sqlalchemy import Column, Integer, String, Date, DateTime, Interval, Text, ForeignKey, text
from sqlalchemy.orm import relationship

from oj.db.base_class import Base

DEFAULT_JUDGE_NUM = 0
DEFAULT_TIME_LIMIT = timedelta(seconds=1)
# SQLite keeps an Interval as a DATETIME offset from the epoch
DEFAULT_TIME_LIMIT_SQLITE = "'1970-01-01 00:00:01.000000'"
DEFAULT_MEMORY_LIMIT_KB = 128000
PENDING_STATUS = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    avatar = Column(Text, nullable=True)
    account = Column(String(32), unique=True, index=True, nullable=False)
    password = Column(String(64), nullable=False)
    join_time = Column(Date, nullable=False, default=lambda: _utcnow().date())
    auth = Column(Integer, nullable=False)

    problems = relationship("Problem", back_populates="owner", passive_deletes=True)
    records = relationship("Record", back_populates="submitter", passive_deletes=True)


class Problem(Base):
    __tablename__ = "problems"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(64), nullable=False)
    description = Column(Text, nullable=True)
    judge_num = Column(Integer, nullable=False, default=DEFAULT_JUDGE_NUM, server_default=text(str(DEFAULT_JUDGE_NUM)))
    # per test case budget
    time_limit = Column(Interval, nullable=False, default=DEFAULT_TIME_LIMIT,
                        server_default=text(DEFAULT_TIME_LIMIT_SQLITE))
    # kilobytes
    memory_limit = Column(Integer, nullable=False, default=DEFAULT_MEMORY_LIMIT_KB,
                          server_default=text(str(DEFAULT_MEMORY_LIMIT_KB)))

    owner_id = Column(Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True, index=True)
    owner = relationship("Account", back_populates="problems")

    records = relationship("Record", back_populates="problem", passive_deletes=True)


class Record(Base):
    __tablename__ = "records"

    id = Column(Integer, primary_key=True, index=True)

    account_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    submitter = relationship("Account", back_populates="records")

    problem_id = Column(Integer, ForeignKey("problems.id", ondelete="CASCADE"), nullable=False, index=True)
    problem = relationship("Problem", back_populates="records")

    language = Column(Integer, nullable=False)
    code = Column(Text, nullable=False)
    submit_time = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    status = Column(Integer, default=PENDING_STATUS, server_default=text(str(PENDING_STATUS)), nullable=False,
                    index=True)
    # milliseconds, unset until a verdict is recorded
    run_time = Column(Integer, nullable=True)
