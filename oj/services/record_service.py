from datetime import timedelta

from sqlalchemy.orm import Session

from oj.core.logging_config import log_store_event
from oj.crud import crud_record
from oj.schemas.envelope import Req
from oj.schemas.record import (
    AccountRecords, ProblemRecords, RecordCreate, RecordFilter, RecordPage, RecordPublic,
    RecordVerdict, StalePendingQuery
)
from oj.services.common import dump, envelope, split_id


@envelope
def insert(db: Session, req: Req):
    record_in = RecordCreate.model_validate(req.data)
    db_record = crud_record.record.create(db, obj_in=record_in)
    log_store_event("record_created", {"record_id": db_record.id, "account_id": db_record.account_id,
                                       "problem_id": db_record.problem_id, "language": db_record.language})
    return dump(RecordPublic, db_record)


@envelope
def update(db: Session, req: Req):
    """Verdict callback of the judge: ``{"id", "status", "runTime"}``."""
    id_, fields = split_id(req.data)
    verdict = RecordVerdict.model_validate(fields)
    db_record = crud_record.record.record_verdict(db, id_=id_, status=verdict.status, run_time=verdict.run_time)
    log_store_event("verdict_recorded", {"record_id": id_, "status": verdict.status,
                                         "run_time": verdict.run_time})
    return dump(RecordPublic, db_record)


@envelope
def query(db: Session, req: Req):
    filters = RecordFilter.model_validate(req.data)
    return [dump(RecordPublic, r) for r in crud_record.record.query(db, filters=filters)]


@envelope
def query_list(db: Session, req: Req):
    page = RecordPage.model_validate(req.data)
    total, records = crud_record.record.get_page(db, page_no=page.page_no, page_size=page.page_size)
    return {"total": total, "result": [dump(RecordPublic, r) for r in records]}


@envelope
def list_by_account(db: Session, req: Req):
    owner = AccountRecords.model_validate(req.data)
    return [dump(RecordPublic, r) for r in crud_record.record.list_by_account(db, account_id=owner.account_id)]


@envelope
def list_by_problem(db: Session, req: Req):
    target = ProblemRecords.model_validate(req.data)
    return [dump(RecordPublic, r) for r in crud_record.record.list_by_problem(db, problem_id=target.problem_id)]


@envelope
def stale_pending(db: Session, req: Req):
    stale = StalePendingQuery.model_validate(req.data)
    records = crud_record.record.list_pending_older_than(db, timeout=timedelta(seconds=stale.timeout_sec))
    return [dump(RecordPublic, r) for r in records]
