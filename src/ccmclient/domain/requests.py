# pylint: disable=line-too-long
"""
Execution requests and method results.

A CimQuery is served by either transport. A ScriptLogic needs a transport
that can run arbitrary PowerShell, which a CIM-only target cannot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_NAMESPACE = "root\\cimv2"

_SCALARS = (type(None), bool, int, float, str)


@dataclass(frozen=True)
class PSTyped:
    """A value rendered with an explicit PowerShell type cast, e.g. [uint32]2."""

    type_name: str
    value: Any


def check_argument(value: Any, where: str = "argument") -> None:
    """
    Raise ValueError unless `value` can be rendered as a PowerShell literal.

    Accepts scalars (None, bool, int, float, str), PSTyped, and lists, tuples
    and mappings of those, nested to any depth.
    """
    if isinstance(value, _SCALARS):
        return
    if isinstance(value, PSTyped):
        check_argument(value.value, where)
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            check_argument(item, f"{where}[{index}]")
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            check_argument(item, f"{where}[{key!r}]")
        return
    raise ValueError(f"{where}: unsupported type {type(value).__name__}")


class CimQuery(BaseModel):
    """Class/filter or WQL query against a CIM namespace."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(DEFAULT_NAMESPACE, description="CIM namespace, e.g. root\\ccm")
    class_name: Optional[str] = Field(None, description="CIM class to enumerate")
    filter: Optional[str] = Field(None, description="WQL filter applied to class_name")
    raw_query: Optional[str] = Field(None, description="Full WQL query, used instead of class_name/filter")
    properties: Optional[Tuple[str, ...]] = Field(None, description="Properties to keep; all when omitted")

    @model_validator(mode="after")
    def check_shape(self) -> "CimQuery":
        """Require exactly one of class_name or raw_query."""
        if not self.class_name and not self.raw_query:
            raise ValueError("CimQuery needs class_name or raw_query")
        if self.class_name and self.raw_query:
            raise ValueError("CimQuery takes class_name or raw_query, not both")
        return self

    def describe(self) -> str:
        """Short form for log lines."""
        if self.raw_query:
            return f"{self.namespace}: {self.raw_query}"
        suffix = f" WHERE {self.filter}" if self.filter else ""
        return f"{self.namespace}:{self.class_name}{suffix}"


class ScriptLogic(BaseModel):
    """PowerShell script block plus positional arguments."""

    model_config = ConfigDict(frozen=True)

    body: str = Field(..., min_length=1, description="Script block text; receives arguments via param()")
    arguments: Tuple[Any, ...] = Field(default_factory=tuple, description="Positional arguments")

    @field_validator("arguments")
    @classmethod
    def check_arguments(cls, v: Tuple[Any, ...]) -> Tuple[Any, ...]:
        """Only values with a PowerShell literal form can cross to the host."""
        for index, value in enumerate(v):
            check_argument(value, f"arguments[{index}]")
        return v


class MethodResult(BaseModel):
    """Outcome of a CIM method invocation."""

    return_value: Optional[int] = Field(None, description="ReturnValue reported by the method")
    outputs: Dict[str, Any] = Field(default_factory=dict, description="Out parameters other than ReturnValue")

    @property
    def succeeded(self) -> bool:
        return self.return_value in (None, 0)

    @classmethod
    def from_output(cls, output: Dict[str, Any] | List[Any] | None) -> "MethodResult":
        """Build from the deserialized Invoke-CimMethod output object."""
        if isinstance(output, list):
            output = output[0] if output else None
        if not output:
            return cls()
        data = dict(output)
        return_value = data.pop("ReturnValue", None)
        return cls(
            return_value=int(return_value) if return_value is not None else None,
            outputs=data,
        )
