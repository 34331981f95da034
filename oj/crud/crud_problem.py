from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from oj.core.exceptions import ForeignKeyViolation, StoreError
from oj.crud.base import CRUDBase
from oj.crud.cascade import check_reference, reference_exists
from oj.db.models import Problem
from oj.schemas.problem import ProblemCreate, ProblemUpdate


class CRUDProblem(CRUDBase[Problem, ProblemCreate, ProblemUpdate]):
    def create(self, db: Session, *, obj_in: ProblemCreate) -> Problem:
        check_reference(db, Problem, "owner_id", obj_in.owner_id)
        return super().create(db, obj_in=obj_in)

    def update(
            self, db: Session, *, db_obj: Problem, obj_in: Union[ProblemUpdate, Dict[str, Any]]
    ) -> Problem:
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        check_reference(db, Problem, "owner_id", update_data.get("owner_id"))
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def get_multi_by_owner(
            self, db: Session, *, owner_id: int, skip: int = 0, limit: int = 100
    ) -> List[Problem]:
        return (
            db.query(self.model)
            .filter(Problem.owner_id == owner_id)
            .order_by(Problem.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def integrity_error(self, db: Session, values: Dict[str, Any]) -> Optional[StoreError]:
        # the owner vanished between the check and the commit
        owner_id = values.get("owner_id")
        if owner_id is not None and not reference_exists(db, Problem, "owner_id", owner_id):
            return ForeignKeyViolation(self.entity, "owner_id", owner_id)
        return None


problem = CRUDProblem(Problem)
