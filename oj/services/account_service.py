from sqlalchemy.orm import Session

from oj.core.logging_config import log_store_event
from oj.crud import crud_account
from oj.schemas.account import AccountCreate, AccountPublic, AccountUpdate
from oj.schemas.envelope import Req
from oj.services.common import dump, envelope, split_id


@envelope
def register(db: Session, req: Req):
    account_in = AccountCreate.model_validate(req.data)
    db_account = crud_account.account.create(db, obj_in=account_in)
    log_store_event("account_created", {"account_id": db_account.id, "account": db_account.account,
                                        "auth": db_account.auth})
    return dump(AccountPublic, db_account)


@envelope
def query(db: Session, req: Req):
    """Look an account up by ``id``, or by login handle when ``account`` is given instead."""
    if "id" not in req.data and "account" in req.data:
        db_account = crud_account.account.find_by_account_name(db, str(req.data["account"]))
    else:
        id_, _ = split_id(req.data)
        db_account = crud_account.account.get_or_raise(db, id_)
    return dump(AccountPublic, db_account)


@envelope
def update(db: Session, req: Req):
    id_, fields = split_id(req.data)
    account_in = AccountUpdate.model_validate(fields)
    db_account = crud_account.account.get_or_raise(db, id_)
    db_account = crud_account.account.update(db, db_obj=db_account, obj_in=account_in)
    log_store_event("account_updated", {"account_id": id_,
                                        "fields": sorted(account_in.model_dump(exclude_unset=True))})
    return dump(AccountPublic, db_account)


@envelope
def delete(db: Session, req: Req):
    id_, _ = split_id(req.data)
    result = crud_account.account.remove(db, id_=id_)
    log_store_event("account_deleted", result.as_dict())
    return result.as_dict()
