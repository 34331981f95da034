from sqlalchemy.orm import Session

from oj.core.logging_config import log_store_event
from oj.crud import crud_problem
from oj.schemas.envelope import Req
from oj.schemas.problem import ProblemCreate, ProblemPublic, ProblemUpdate
from oj.services.common import dump, envelope, split_id


@envelope
def insert(db: Session, req: Req):
    problem_in = ProblemCreate.model_validate(req.data)
    db_problem = crud_problem.problem.create(db, obj_in=problem_in)
    log_store_event("problem_created", {"problem_id": db_problem.id, "owner_id": db_problem.owner_id})
    return dump(ProblemPublic, db_problem)


@envelope
def query(db: Session, req: Req):
    id_, _ = split_id(req.data)
    return dump(ProblemPublic, crud_problem.problem.get_or_raise(db, id_))


@envelope
def update(db: Session, req: Req):
    id_, fields = split_id(req.data)
    problem_in = ProblemUpdate.model_validate(fields)
    db_problem = crud_problem.problem.get_or_raise(db, id_)
    db_problem = crud_problem.problem.update(db, db_obj=db_problem, obj_in=problem_in)
    log_store_event("problem_updated", {"problem_id": id_,
                                        "fields": sorted(problem_in.model_dump(exclude_unset=True))})
    return dump(ProblemPublic, db_problem)


@envelope
def delete(db: Session, req: Req):
    id_, _ = split_id(req.data)
    result = crud_problem.problem.remove(db, id_=id_)
    log_store_event("problem_deleted", result.as_dict())
    return result.as_dict()
