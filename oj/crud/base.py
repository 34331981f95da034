import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from oj.core.exceptions import NotFound, StoreError, UnknownField
from oj.crud.cascade import CascadeResult, delete_with_dependents
from oj.db.base_class import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with default methods to Create, Read, Update, Delete.

        Every write commits its own transaction and rolls back on failure.

        **Parameters**

        * `model`: A SQLAlchemy model class
        """
        self.model = model
        self.entity = model.__name__

    def get(self, db: Session, id_: Any) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id_).first()

    def get_or_raise(self, db: Session, id_: Any) -> ModelType:
        db_obj = self.get(db, id_)
        if db_obj is None:
            raise NotFound(self.entity, id_)
        return db_obj

    def get_multi(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[ModelType]:
        return db.query(self.model).order_by(self.model.id).offset(skip).limit(limit).all()

    def create(self, db: Session, *, obj_in: CreateSchemaType) -> ModelType:
        values = obj_in.model_dump()
        db_obj = self.model(**values)
        db.add(db_obj)
        return self._persist(db, db_obj, values)

    def update(
            self, db: Session, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """Apply the given fields; None for a required column leaves it unchanged."""
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        columns = self.model.__table__.columns
        for field in update_data:
            if field not in columns:
                raise UnknownField(self.entity, field)
        update_data = {
            field: value for field, value in update_data.items()
            if value is not None or columns[field].nullable
        }
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        return self._persist(db, db_obj, update_data)

    def remove(self, db: Session, *, id_: int) -> CascadeResult:
        try:
            result = delete_with_dependents(db, self.model, id_)
            db.commit()
            return result
        except StoreError:
            db.rollback()
            raise
        except Exception:
            logger.error(f"Failed to delete {self.entity} {id_}", exc_info=True)
            db.rollback()
            raise

    def integrity_error(self, db: Session, values: Dict[str, Any]) -> Optional[StoreError]:
        """Typed error for an IntegrityError raised while writing ``values``; None re-raises it."""
        return None

    def _persist(self, db: Session, db_obj: ModelType, values: Dict[str, Any]) -> ModelType:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            error = self.integrity_error(db, values)
            if error is None:
                logger.error(f"Integrity error writing {self.entity}", exc_info=True)
                raise
            logger.warning(f"Rejected {self.entity} write: {error}")
            raise error from e
        except Exception:
            logger.error(f"Failed to write {self.entity}", exc_info=True)
            db.rollback()
            raise
        db.refresh(db_obj)
        return db_obj
