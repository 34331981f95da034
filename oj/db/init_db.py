import logging
from typing import Iterable, List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from oj.core.exceptions import UniqueConstraintViolation
from oj.crud import crud_account
from oj.db.base_class import Base
from oj.db.models import Account
from oj.schemas.account import AccountCreate

logger = logging.getLogger(__name__)


def init_db(engine: Optional[Engine] = None) -> None:
    if engine is None:
        from oj.db.session import engine as default_engine
        engine = default_engine
    Base.metadata.create_all(bind=engine)
    logger.info(f"Tables ensured on {engine.url.render_as_string(hide_password=True)}")


def seed_accounts(db: Session, accounts: Iterable[AccountCreate]) -> List[Account]:
    """Create the given accounts, skipping handles that already exist."""
    created = []
    for account_in in accounts:
        if crud_account.account.get_by_account(db, account=account_in.account):
            logger.info(f"Skipping: account '{account_in.account}' already exists.")
            continue
        try:
            created.append(crud_account.account.create(db, obj_in=account_in))
        except UniqueConstraintViolation:
            logger.info(f"Skipping: account '{account_in.account}' was created concurrently.")
            continue
        logger.info(f"Created account '{account_in.account}' with tier {account_in.auth}.")
    return created
