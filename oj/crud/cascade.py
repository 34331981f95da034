"""
Referential-integrity engine.

Every reference between tables is listed once in ``REFERENCES`` together with
what happens to the referencing rows when the referenced row is deleted.
Deletes walk that table explicitly instead of relying on the database, so the
behaviour is the same on engines without foreign key enforcement. The
foreign keys in ``oj.db.models`` declare the same ``ondelete`` policies.

Nothing here commits: callers run ``delete_with_dependents`` inside their
transaction and commit once, so readers observe either the state before the
delete or the fully cascaded state after it.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple, Type

from sqlalchemy.orm import Session

from oj.core.exceptions import ForeignKeyViolation, NotFound
from oj.db.base_class import Base
from oj.db.models import Account, Problem, Record

logger = logging.getLogger(__name__)


class OnDelete(str, Enum):
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"


@dataclass(frozen=True)
class Reference:
    child: Type[Base]
    column: str
    parent: Type[Base]
    on_delete: OnDelete


REFERENCES: Tuple[Reference, ...] = (
    # a problem outlives its author
    Reference(Problem, "owner_id", Account, OnDelete.SET_NULL),
    Reference(Record, "account_id", Account, OnDelete.CASCADE),
    Reference(Record, "problem_id", Problem, OnDelete.CASCADE),
)


@dataclass
class CascadeResult:
    entity: str
    id: int
    deleted: Dict[str, int] = field(default_factory=dict)
    nullified: Dict[str, int] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "entity": self.entity,
            "id": self.id,
            "deleted": dict(self.deleted),
            "nullified": dict(self.nullified),
        }


def dependents_of(model: Type[Base]) -> List[Reference]:
    return [ref for ref in REFERENCES if ref.parent is model]


def reference_for(child: Type[Base], column: str) -> Reference:
    for ref in REFERENCES:
        if ref.child is child and ref.column == column:
            return ref
    raise KeyError(f"{child.__name__}.{column} is not a registered reference")


def reference_exists(db: Session, child: Type[Base], column: str, value: Any) -> bool:
    parent = reference_for(child, column).parent
    return db.query(parent.id).filter(parent.id == value).first() is not None


def check_reference(db: Session, child: Type[Base], column: str, value: Any) -> None:
    """Raise ForeignKeyViolation unless ``value`` names an existing parent row. None is allowed."""
    if value is None:
        return
    if not reference_exists(db, child, column, value):
        raise ForeignKeyViolation(child.__name__, column, value)


def _tally(counts: Dict[str, int], model: Type[Base], count: int) -> None:
    counts[model.__tablename__] = counts.get(model.__tablename__, 0) + count


def _delete_rows(db: Session, model: Type[Base], ids: Sequence[int], result: CascadeResult) -> None:
    for ref in dependents_of(model):
        column = getattr(ref.child, ref.column)
        if ref.on_delete is OnDelete.SET_NULL:
            count = (
                db.query(ref.child)
                .filter(column.in_(ids))
                .update({ref.column: None}, synchronize_session="fetch")
            )
            _tally(result.nullified, ref.child, count)
        else:
            child_ids = [row[0] for row in db.query(ref.child.id).filter(column.in_(ids)).all()]
            if child_ids:
                _delete_rows(db, ref.child, child_ids, result)

    count = db.query(model).filter(model.id.in_(ids)).delete(synchronize_session="fetch")
    _tally(result.deleted, model, count)


def delete_with_dependents(db: Session, model: Type[Base], id_: int) -> CascadeResult:
    if db.query(model.id).filter(model.id == id_).first() is None:
        raise NotFound(model.__name__, id_)

    result = CascadeResult(entity=model.__name__, id=id_)
    _delete_rows(db, model, [id_], result)

    # a concurrent delete got there first
    if result.deleted.get(model.__tablename__, 0) == 0:
        raise NotFound(model.__name__, id_)

    logger.debug(f"Cascade for {model.__name__} {id_}: deleted={result.deleted} nullified={result.nullified}")
    return result
