from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

DATA_ERROR = "data error"
INTERNAL_ERROR = "internal error"


class Req(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict)


class Res(BaseModel):
    status: Literal["success", "error"]
    message: str = ""
    data: Optional[Any] = None

    @classmethod
    def success(cls, data: Any = None, message: str = "ok") -> "Res":
        return cls(status="success", message=message, data=data)

    @classmethod
    def error(cls, message: str, kind: str, detail: str) -> "Res":
        return cls(status="error", message=message, data={"kind": kind, "detail": detail})
