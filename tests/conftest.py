from typing import Generator

import pytest
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from oj.crud import crud_account, crud_problem
from oj.db import models  # noqa: F401
from oj.db.base_class import Base
from oj.db.models import Account, Problem
from oj.db.session import build_engine
from oj.schemas.account import AccountCreate, Authority
from oj.schemas.problem import ProblemCreate

TEST_DATABASE_URL = "sqlite:///:memory:"

engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def file_sessionmaker(tmp_path) -> Generator[sessionmaker, None, None]:
    """Sessions on a file database, for tests that need several connections at once."""
    file_engine = build_engine(f"sqlite:///{tmp_path / 'oj_test.db'}")
    Base.metadata.create_all(bind=file_engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=file_engine)
    finally:
        file_engine.dispose()


@pytest.fixture
def admin(db: Session) -> Account:
    account_in = AccountCreate(account="admin", password="jzm19260817", auth=Authority.ADMIN)
    return crud_account.account.create(db, obj_in=account_in)


@pytest.fixture
def user(db: Session) -> Account:
    account_in = AccountCreate(account="user", password="password123", auth=Authority.USER)
    return crud_account.account.create(db, obj_in=account_in)


@pytest.fixture
def a_plus_b(db: Session, admin: Account) -> Problem:
    problem_in = ProblemCreate(title="A+B", description="Print a + b.", owner_id=admin.id)
    return crud_problem.problem.create(db, obj_in=problem_in)
