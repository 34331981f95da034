from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from oj.core.config import settings
from oj.core.exceptions import NotFound, StoreError, UniqueConstraintViolation
from oj.crud.base import CRUDBase
from oj.db.models import Account
from oj.schemas.account import AccountCreate, AccountUpdate


class CRUDAccount(CRUDBase[Account, AccountCreate, AccountUpdate]):
    @staticmethod
    def get_by_account(db: Session, *, account: str) -> Optional[Account]:
        return db.query(Account).filter(Account.account == account).first()

    def find_by_account_name(self, db: Session, name: str) -> Account:
        db_obj = self.get_by_account(db, account=name)
        if db_obj is None:
            raise NotFound(self.entity, name, field="account")
        return db_obj

    def create(self, db: Session, *, obj_in: AccountCreate) -> Account:
        # no existence pre-check: the unique index decides, atomically with the insert
        db_obj = Account(
            avatar=obj_in.avatar if obj_in.avatar is not None else settings.DEFAULT_AVATAR,
            account=obj_in.account,
            password=obj_in.password,
            auth=obj_in.auth,
        )
        db.add(db_obj)
        return self._persist(db, db_obj, obj_in.model_dump())

    def integrity_error(self, db: Session, values: Dict[str, Any]) -> Optional[StoreError]:
        if "account" not in values:
            return None
        return UniqueConstraintViolation(self.entity, "account", values["account"])


account = CRUDAccount(Account)
