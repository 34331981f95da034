import logging
from datetime import datetime, timezone, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.orm import Session

from oj.core.exceptions import ForeignKeyViolation, InvalidStateTransition, StoreError
from oj.crud.base import CRUDBase
from oj.crud.cascade import CascadeResult, check_reference, reference_exists
from oj.db.models import Record
from oj.schemas.record import RecordCreate, RecordFilter, RecordStatus, RecordVerdict

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CRUDRecord(CRUDBase[Record, RecordCreate, RecordVerdict]):
    def create(self, db: Session, *, obj_in: RecordCreate) -> Record:
        check_reference(db, Record, "account_id", obj_in.account_id)
        check_reference(db, Record, "problem_id", obj_in.problem_id)

        values = obj_in.model_dump()
        db_obj = Record(
            account_id=obj_in.account_id,
            problem_id=obj_in.problem_id,
            language=obj_in.language,
            code=obj_in.code,
            status=RecordStatus.PENDING.value,
            run_time=None,
        )
        db.add(db_obj)
        return self._persist(db, db_obj, values)

    def update(self, db: Session, *, db_obj: Record, obj_in: Any) -> Record:
        raise InvalidStateTransition(self.entity, db_obj.id, "records only change through record_verdict")

    def remove(self, db: Session, *, id_: int) -> CascadeResult:
        raise InvalidStateTransition(self.entity, id_, "records are deleted with their account or problem")

    def record_verdict(
            self, db: Session, *, id_: int, status: int, run_time: Optional[int]
    ) -> Record:
        """
        Move a pending record to its verdict.

        The transition is one conditional UPDATE, so of several concurrent
        calls for the same record exactly one changes it.
        """
        if not RecordStatus.is_terminal(status):
            raise InvalidStateTransition(self.entity, id_, f"status {status} is not a verdict")

        try:
            changed = (
                db.query(Record)
                .filter(Record.id == id_, Record.status == RecordStatus.PENDING.value)
                .update({"status": int(status), "run_time": run_time}, synchronize_session=False)
            )
            db.commit()
        except Exception:
            logger.error(f"Failed to record verdict for record {id_}", exc_info=True)
            db.rollback()
            raise

        db_obj = self.get_or_raise(db, id_)
        if changed == 0:
            logger.warning(f"Record {id_} already has verdict {db_obj.status}; rejected {status}")
            raise InvalidStateTransition(self.entity, id_, f"verdict already recorded (status {db_obj.status})")
        db.refresh(db_obj)
        return db_obj

    def list_by_account(self, db: Session, *, account_id: int) -> List[Record]:
        return (
            db.query(self.model)
            .filter(Record.account_id == account_id)
            .order_by(Record.submit_time.asc(), Record.id.asc())
            .all()
        )

    def list_by_problem(self, db: Session, *, problem_id: int) -> List[Record]:
        return (
            db.query(self.model)
            .filter(Record.problem_id == problem_id)
            .order_by(Record.submit_time.asc(), Record.id.asc())
            .all()
        )

    def query(self, db: Session, *, filters: RecordFilter) -> List[Record]:
        criteria = [
            getattr(Record, field) == value
            for field, value in filters.model_dump(exclude_none=True).items()
        ]
        return (
            db.query(self.model)
            .filter(*criteria)
            .order_by(desc(Record.submit_time), desc(Record.id))
            .all()
        )

    def get_page(self, db: Session, *, page_no: int, page_size: int) -> Tuple[int, List[Record]]:
        total = db.query(self.model).count()
        records = (
            db.query(self.model)
            .order_by(desc(Record.submit_time), desc(Record.id))
            .offset((page_no - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return total, records

    def list_pending_older_than(
            self, db: Session, *, timeout: timedelta, now: Optional[datetime] = None
    ) -> List[Record]:
        # submit_time is stored as naive UTC
        cutoff = _as_utc(now or datetime.now(timezone.utc)) - timeout
        return (
            db.query(self.model)
            .filter(Record.status == RecordStatus.PENDING.value, Record.submit_time < cutoff)
            .order_by(Record.submit_time.asc(), Record.id.asc())
            .all()
        )

    @staticmethod
    def is_overdue(db_obj: Record, timeout: timedelta, now: Optional[datetime] = None) -> bool:
        if db_obj.status != RecordStatus.PENDING:
            return False
        now = _as_utc(now or datetime.now(timezone.utc))
        return now - _as_utc(db_obj.submit_time) > timeout

    def integrity_error(self, db: Session, values: Dict[str, Any]) -> Optional[StoreError]:
        for column in ("account_id", "problem_id"):
            if not reference_exists(db, Record, column, values[column]):
                return ForeignKeyViolation(self.entity, column, values[column])
        return None


record = CRUDRecord(Record)
