"""
Shared pieces for feature operations.

Feature operations receive the executors plus one ConnectionContext and
return a payload; the batch runner handles per-target failures.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ccmclient.application.logic_executor import RemoteLogicExecutor
from ccmclient.application.query_executor import CimQueryExecutor
from ccmclient.domain.context import ConnectionContext
from ccmclient.domain.errors import MethodCallFailed
from ccmclient.domain.requests import MethodResult

logger = logging.getLogger(__name__)

NS_CCM = "root\\ccm"
NS_INVAGT = "root\\ccm\\invagt"
NS_SOFTMGMT = "root\\ccm\\SoftMgmtAgent"
NS_CLIENTSDK = "root\\ccm\\ClientSDK"
NS_DEFAULT = "root\\default"

# Windows PowerShell serializes DateTime as \/Date(ms[+zone])\/
_MS_DATE_RE = re.compile(r"^/Date\((-?\d+)(?:[+-]\d{4})?\)/$")
# CIM DMTF datetime: yyyymmddHHMMSS.mmmmmm+UUU (UTC offset in minutes)
_DMTF_RE = re.compile(r"^(\d{14})\.(\d{6})([+-])(\d{3})$")
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


@dataclass(frozen=True)
class Executors:
    """The two execution primitives feature operations build on."""

    query: CimQueryExecutor
    logic: RemoteLogicExecutor


def parse_cim_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a datetime as it arrives from either transport.

    Accepts the Windows PowerShell JSON form, ISO 8601 (PowerShell 7) and
    CIM DMTF strings. Returns None for empty or unrecognized values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, dict):
        # ConvertTo-Json at depth can emit {"value": "\/Date(...)\/", "DateTime": "..."}
        value = value.get("value") or value.get("DateTime")
        if value is None:
            return None

    text = str(value).strip().replace("\\/", "/")

    match = _MS_DATE_RE.match(text)
    if match:
        return datetime.fromtimestamp(int(match.group(1)) / 1000, tz=timezone.utc)

    match = _DMTF_RE.match(text)
    if match:
        stamp = datetime.strptime(match.group(1) + match.group(2), "%Y%m%d%H%M%S%f")
        offset = int(match.group(4)) * (1 if match.group(3) == "+" else -1)
        return stamp.replace(tzinfo=timezone(timedelta(minutes=offset)))

    try:
        return datetime.fromisoformat(_FRACTION_RE.sub(r"\1", text).replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unrecognized datetime value: %r", value)
        return None


def to_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def to_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def require_success(result: MethodResult, context: ConnectionContext, what: str) -> MethodResult:
    """Raise MethodCallFailed unless the method returned 0 (or nothing)."""
    if not result.succeeded:
        raise MethodCallFailed(
            f"{what} returned {result.return_value}",
            computer_name=context.resolved_name,
            return_value=result.return_value,
        )
    return result
