"""
PowerShell script building and output parsing.

Python values are rendered as PowerShell literals (never interpolated into
quoted strings), script bodies travel base64-encoded, and every wrapped
script prints exactly one compressed JSON array as its final output line.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Iterable, Mapping

from ccmclient.domain.requests import PSTyped

logger = logging.getLogger(__name__)

RESULT_DEPTH = 5

# Properties PowerShell/CIM add to every object; dropped so records compare
# equal regardless of transport
METADATA_PROPERTIES = (
    "PSComputerName",
    "PSShowComputerName",
    "RunspaceId",
    "CimClass",
    "CimInstanceProperties",
    "CimSystemProperties",
)

PROLOGUE = (
    "$ErrorActionPreference = 'Stop'",
    "$ProgressPreference = 'SilentlyContinue'",
)


def ps_cast(type_name: str, value: Any) -> PSTyped:
    return PSTyped(type_name, value)


def ps_quote(value: str) -> str:
    """Single-quoted PowerShell string literal."""
    return "'" + value.replace("'", "''") + "'"


def ps_literal(value: Any) -> str:
    """
    Render a Python value as a PowerShell expression.

    Supports None, bool, int, float, str, PSTyped, sequences and mappings
    (as hashtables). Raises TypeError for anything else.
    """
    if value is None:
        return "$null"
    if isinstance(value, PSTyped):
        return f"[{value.type_name}]({ps_literal(value.value)})"
    if isinstance(value, bool):
        return "$true" if value else "$false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return ps_quote(value)
    if isinstance(value, Mapping):
        pairs = "; ".join(
            f"{ps_quote(str(key))} = {ps_literal(item)}" for key, item in value.items()
        )
        return "@{" + pairs + "}"
    if isinstance(value, (list, tuple)):
        items = [ps_literal(item) for item in value]
        if len(items) == 1:
            # unary comma keeps a single element from being unrolled
            return f"@(,{items[0]})"
        return "@(" + ", ".join(items) + ")"
    raise TypeError(f"Cannot render {type(value).__name__} as a PowerShell literal")


def ps_string_array(values: Iterable[str]) -> str:
    """Comma-separated list of quoted strings, for cmdlet array parameters."""
    return ", ".join(ps_quote(value) for value in values)


def decode_expression(text: str) -> str:
    """Expression that yields `text` on the far end without any quoting concerns."""
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return (
        "[System.Text.Encoding]::UTF8.GetString("
        f"[System.Convert]::FromBase64String('{encoded}'))"
    )


def ps_credential(username: str, password: str, variable: str = "credential") -> str:
    """Lines creating a PSCredential in `$<variable>`."""
    return "\n".join([
        f"$__securePassword = ConvertTo-SecureString {ps_quote(password)} -AsPlainText -Force",
        f"${variable} = New-Object System.Management.Automation.PSCredential("
        f"{ps_quote(username)}, $__securePassword)",
    ])


def wrap_logic(body: str, arguments: Iterable[Any] = ()) -> str:
    """
    Wrap a script block so it runs with positional arguments and emits JSON.

    The block's output is collected into an array, so zero, one or many
    results all arrive as a JSON array.
    """
    args = list(arguments)
    lines = list(PROLOGUE)
    lines.append(f"$__body = {decode_expression(body)}")
    lines.append(f"$__args = [object[]]::new({len(args)})")
    for index, value in enumerate(args):
        lines.append(f"$__args[{index}] = {ps_literal(value)}")
    lines.append("$__block = [scriptblock]::Create($__body)")
    lines.append("$__result = @(& $__block @__args)")
    lines.append(f"ConvertTo-Json -InputObject $__result -Depth {RESULT_DEPTH} -Compress")
    return "\n".join(lines)


def parse_json_output(stdout: str) -> Any:
    """
    Parse the JSON document a wrapped script printed.

    Takes the last non-empty line first (anything a script wrote before its
    result is ignored), then the whole output. Empty output means None.

    Raises:
        ValueError: If no JSON could be parsed
    """
    text = (stdout or "").strip()
    if not text:
        return None

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    try:
        return json.loads(lines[-1])
    except json.JSONDecodeError:
        pass

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug("Unparseable PowerShell output: %s", text[:200])
        raise ValueError(f"Output is not JSON: {e}") from e


def as_list(value: Any) -> list[Any]:
    """Normalize parsed output to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def strip_metadata(record: Any) -> Any:
    """Drop transport-added properties from a record dict."""
    if not isinstance(record, dict):
        return record
    return {key: value for key, value in record.items() if key not in METADATA_PROPERTIES}
