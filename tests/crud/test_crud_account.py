import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session

from oj.core.config import settings
from oj.core.exceptions import NotFound, UniqueConstraintViolation, UnknownField
from oj.crud import crud_account, crud_problem, crud_record
from oj.db.models import Account, Problem
from oj.schemas.account import AccountCreate, AccountUpdate, Authority
from oj.schemas.problem import ProblemCreate
from oj.schemas.record import RecordCreate, Language


def test_create_account(db: Session):
    account_in = AccountCreate(avatar="http://127.0.0.1:8001/a.png", account="alice", password="pw", auth=10)
    account = crud_account.account.create(db, obj_in=account_in)

    assert account.id is not None
    assert account.account == "alice"
    assert account.avatar == "http://127.0.0.1:8001/a.png"
    assert account.auth == 10
    assert account.join_time == datetime.now(timezone.utc).date()


def test_create_account_assigns_increasing_ids(db: Session):
    first = crud_account.account.create(db, obj_in=AccountCreate(account="a", password="pw", auth=10))
    second = crud_account.account.create(db, obj_in=AccountCreate(account="b", password="pw", auth=10))
    assert second.id > first.id


def test_create_account_uses_default_avatar(db: Session, monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_AVATAR", "http://127.0.0.1:8001/null")
    account = crud_account.account.create(db, obj_in=AccountCreate(account="bob", password="pw", auth=10))
    assert account.avatar == "http://127.0.0.1:8001/null"


def test_create_account_auth_is_stored_as_given(db: Session):
    account = crud_account.account.create(db, obj_in=AccountCreate(account="odd", password="pw", auth=25))
    assert crud_account.account.get(db, account.id).auth == 25


def test_duplicate_account_handle_rejected(db: Session, admin: Account):
    with pytest.raises(UniqueConstraintViolation) as exc_info:
        crud_account.account.create(db, obj_in=AccountCreate(account="admin", password="other", auth=10))

    assert exc_info.value.field == "account"
    assert exc_info.value.value == "admin"
    assert db.query(Account).count() == 1
    assert crud_account.account.get(db, admin.id).password == "jzm19260817"


def test_account_handle_is_case_sensitive(db: Session, admin: Account):
    other = crud_account.account.create(db, obj_in=AccountCreate(account="Admin", password="pw", auth=10))
    assert other.id != admin.id


def test_find_by_account_name(db: Session, admin: Account):
    found = crud_account.account.find_by_account_name(db, "admin")
    assert found.id == admin.id


def test_find_by_account_name_missing(db: Session):
    with pytest.raises(NotFound) as exc_info:
        crud_account.account.find_by_account_name(db, "ghost")
    assert exc_info.value.field == "account"
    assert crud_account.account.get_by_account(db, account="ghost") is None


def test_update_account(db: Session, user: Account):
    join_time = user.join_time
    updated = crud_account.account.update(
        db, db_obj=user, obj_in=AccountUpdate(avatar="http://x/y.png", password="new-password")
    )
    assert updated.avatar == "http://x/y.png"
    assert updated.password == "new-password"
    assert updated.account == "user"
    assert updated.join_time == join_time


def test_update_account_ignores_null_required_fields(db: Session, user: Account):
    updated = crud_account.account.update(db, db_obj=user, obj_in={"password": None, "avatar": None})
    assert updated.password == "password123"
    assert updated.avatar is None


def test_update_account_rename_collision(db: Session, admin: Account, user: Account):
    with pytest.raises(UniqueConstraintViolation):
        crud_account.account.update(db, db_obj=user, obj_in=AccountUpdate(account="admin"))

    assert crud_account.account.get(db, user.id).account == "user"


def test_delete_account_keeps_owned_problems(db: Session, admin: Account, a_plus_b: Problem):
    result = crud_account.account.remove(db, id_=admin.id)

    assert result.nullified == {"problems": 1}
    assert crud_account.account.get(db, admin.id) is None
    problem = crud_problem.problem.get(db, a_plus_b.id)
    assert problem is not None
    assert problem.owner_id is None


def test_delete_account_removes_its_records(db: Session, admin: Account, user: Account, a_plus_b: Problem):
    mine = [
        crud_record.record.create(db, obj_in=RecordCreate(
            account_id=user.id, problem_id=a_plus_b.id, language=Language.PYTHON3, code=f"print({i})"))
        for i in range(3)
    ]
    theirs = crud_record.record.create(db, obj_in=RecordCreate(
        account_id=admin.id, problem_id=a_plus_b.id, language=Language.C, code="int main(){}"))
    mine_ids = [r.id for r in mine]

    result = crud_account.account.remove(db, id_=user.id)

    assert result.deleted == {"records": 3, "accounts": 1}
    for id_ in mine_ids:
        assert crud_record.record.get(db, id_) is None
    assert crud_record.record.list_by_account(db, account_id=user.id) == []
    assert crud_record.record.get(db, theirs.id) is not None


def test_delete_account_nullifies_problem_but_keeps_other_records(
        db: Session, admin: Account, user: Account, a_plus_b: Problem
):
    record = crud_record.record.create(db, obj_in=RecordCreate(
        account_id=user.id, problem_id=a_plus_b.id, language=Language.CPP, code="..."))

    crud_account.account.remove(db, id_=admin.id)

    assert crud_problem.problem.get(db, a_plus_b.id).owner_id is None
    assert crud_record.record.get(db, record.id) is not None


def test_delete_missing_account(db: Session):
    with pytest.raises(NotFound):
        crud_account.account.remove(db, id_=404)


def test_concurrent_creation_with_same_handle(file_sessionmaker):
    barrier = threading.Barrier(4)

    def create(_):
        session = file_sessionmaker()
        try:
            barrier.wait()
            crud_account.account.create(session, obj_in=AccountCreate(account="race", password="pw", auth=10))
            return "created"
        except UniqueConstraintViolation:
            return "rejected"
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=4) as pool:
        outcomes = list(pool.map(create, range(4)))

    assert outcomes.count("created") == 1
    assert outcomes.count("rejected") == 3

    session = file_sessionmaker()
    try:
        assert session.query(Account).filter(Account.account == "race").count() == 1
    finally:
        session.close()


def test_seeded_tiers_round_trip(db: Session):
    for handle, tier in (("admin", Authority.ADMIN), ("judger", Authority.JUDGER), ("user", Authority.USER)):
        crud_account.account.create(db, obj_in=AccountCreate(account=handle, password="pw", auth=tier))

    assert crud_account.account.find_by_account_name(db, "judger").auth == 20
    assert [a.account for a in crud_account.account.get_multi(db)] == ["admin", "judger", "user"]


def test_delete_account_orphans_every_owned_problem(db: Session, admin: Account, a_plus_b: Problem):
    crud_problem.problem.create(db, obj_in=ProblemCreate(title="A-B", owner_id=admin.id))

    result = crud_account.account.remove(db, id_=admin.id)

    assert result.nullified == {"problems": 2}
    assert db.query(Problem).count() == 2
    assert db.query(Problem).filter(Problem.owner_id.is_(None)).count() == 2


def test_update_account_with_unknown_field(db: Session, user: Account):
    with pytest.raises(UnknownField):
        crud_account.account.update(db, db_obj=user, obj_in={"nickname": "u"})

    assert crud_account.account.get(db, user.id).account == "user"
