# pylint: disable=missing-module-docstring,line-too-long
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResultRecord(BaseModel):
    """
    Outcome of one operation against one target.

    Railway style: either `payload` (success) or `error`/`error_kind` (failure).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    computer_name: str = Field(..., description="Resolved computer name, or the target as given when resolution failed")
    success: bool = Field(..., description="Whether the operation succeeded for this target")
    payload: Any = Field(None, description="Operation result on success")
    error: Optional[str] = Field(None, description="Error details on failure")
    error_kind: Optional[str] = Field(None, description="Exception class name on failure")
    transport: Optional[str] = Field(None, description="Transport label used (local/cim/cim-hostname/pssession)")
    degraded: Optional[str] = Field(None, description="Resolution note when the transport preference was not met")

    @classmethod
    def ok(cls, computer_name: str, payload: Any, transport: Optional[str] = None, degraded: Optional[str] = None) -> "ResultRecord":
        return cls(computer_name=computer_name, success=True, payload=payload, transport=transport, degraded=degraded)

    @classmethod
    def failed(cls, computer_name: str, error: BaseException, transport: Optional[str] = None, degraded: Optional[str] = None) -> "ResultRecord":
        message = getattr(error, "message", None) or str(error) or type(error).__name__
        return cls(
            computer_name=computer_name,
            success=False,
            error=message,
            error_kind=type(error).__name__,
            transport=transport,
            degraded=degraded,
        )

    def to_dict(self) -> dict:
        """JSON-friendly dump."""
        return self.model_dump(mode="json")
