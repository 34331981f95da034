import functools
import logging
from typing import Any, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from oj.core.exceptions import StoreError
from oj.schemas.envelope import DATA_ERROR, INTERNAL_ERROR, Req, Res

logger = logging.getLogger(__name__)

Operation = Callable[[Session, Req], Any]


class EntityRef(BaseModel):
    id: int


def split_id(data: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
    """Separate the target id from the fields of an update request."""
    id_ = EntityRef.model_validate(data).id
    fields = {key: value for key, value in data.items() if key != "id"}
    return id_, fields


def dump(schema: Type[BaseModel], db_obj: Any) -> Dict[str, Any]:
    return schema.model_validate(db_obj).model_dump(mode="json", by_alias=True)


def envelope(operation: Operation) -> Callable[[Session, Optional[Dict[str, Any]]], Dict[str, Any]]:
    """
    Wrap a store operation so it speaks the request/response envelope.

    The wrapped callable takes ``{"data": {...}}`` and always returns
    ``{"status", "message", "data"}``; store failures and invalid requests
    become "data error", database failures become "internal error".
    """

    @functools.wraps(operation)
    def wrapper(db: Session, request: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        name = operation.__name__
        try:
            req = Req.model_validate(request or {})
            data = operation(db, req)
        except ValidationError as e:
            logger.warning(f"{name}: invalid request: {e.error_count()} error(s)")
            return Res.error(DATA_ERROR, "ValidationError", str(e)).model_dump()
        except StoreError as e:
            logger.warning(f"{name}: {type(e).__name__}: {e}")
            return Res.error(DATA_ERROR, type(e).__name__, str(e)).model_dump()
        except SQLAlchemyError as e:
            logger.error(f"{name}: database error", exc_info=True)
            db.rollback()
            return Res.error(INTERNAL_ERROR, type(e).__name__, str(e)).model_dump()
        return Res.success(data).model_dump()

    return wrapper
