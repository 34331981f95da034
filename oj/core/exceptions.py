from typing import Any, Optional


class StoreError(Exception):
    """Base class for failures surfaced by the stores.

    Every store error is scoped to the single operation that raised it; the
    session has already been rolled back when one reaches the caller.
    """

    def __init__(self, entity: str, message: str):
        self.entity = entity
        super().__init__(message)


class UniqueConstraintViolation(StoreError):
    def __init__(self, entity: str, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(entity, f"{entity} with {field}={value!r} already exists")


class ForeignKeyViolation(StoreError):
    def __init__(self, entity: str, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(entity, f"{entity}.{field}={value!r} does not reference an existing row")


class NotFound(StoreError):
    def __init__(self, entity: str, key: Any, field: str = "id"):
        self.field = field
        self.key = key
        super().__init__(entity, f"{entity} with {field}={key!r} not found")


class InvalidStateTransition(StoreError):
    def __init__(self, entity: str, id_: Optional[int], detail: str):
        self.id = id_
        super().__init__(entity, f"{entity} {id_}: {detail}")


class UnknownField(StoreError):
    def __init__(self, entity: str, field: str):
        self.field = field
        super().__init__(entity, f"{entity} has no field {field!r}")
