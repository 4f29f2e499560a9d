"""
Registry access through StdRegProv.

Method calls only, so every transport kind can serve them.
"""

from __future__ import annotations

import logging
from typing import Any

from ccmclient.application.features.base import NS_DEFAULT, Executors, require_success
from ccmclient.domain.client_models import RegistryValue
from ccmclient.domain.context import ConnectionContext
from ccmclient.infrastructure.powershell.scripts import ps_cast

logger = logging.getLogger(__name__)

HIVES: dict[str, int] = {
    "HKCR": 0x80000000,
    "HKCU": 0x80000001,
    "HKLM": 0x80000002,
    "HKU": 0x80000003,
    "HKCC": 0x80000005,
}

_HIVE_ALIASES = {
    "HKEY_CLASSES_ROOT": "HKCR",
    "HKEY_CURRENT_USER": "HKCU",
    "HKEY_LOCAL_MACHINE": "HKLM",
    "HKEY_USERS": "HKU",
    "HKEY_CURRENT_CONFIG": "HKCC",
}

# kind -> (Get method, Set method, data parameter)
VALUE_KINDS: dict[str, tuple[str, str, str]] = {
    "string": ("GetStringValue", "SetStringValue", "sValue"),
    "expand_string": ("GetExpandedStringValue", "SetExpandedStringValue", "sValue"),
    "dword": ("GetDWORDValue", "SetDWORDValue", "uValue"),
    "qword": ("GetQWORDValue", "SetQWORDValue", "uValue"),
    "multi_string": ("GetMultiStringValue", "SetMultiStringValue", "sValue"),
}

# StdRegProv ReturnValue for a missing key or value
_NOT_FOUND = (1, 2)


def normalize_hive(hive: str) -> str:
    """
    Canonical short hive name.

    Raises:
        ValueError: If the hive is unknown
    """
    key = hive.strip().upper().rstrip(":")
    key = _HIVE_ALIASES.get(key, key)
    if key not in HIVES:
        raise ValueError(f"Unknown registry hive: {hive}")
    return key


def normalize_kind(kind: str) -> str:
    key = kind.strip().lower()
    if key not in VALUE_KINDS:
        raise ValueError(f"Unknown registry value kind: {kind} ({', '.join(VALUE_KINDS)})")
    return key


def _data_argument(kind: str, value: Any) -> Any:
    if kind == "dword":
        return ps_cast("uint32", int(value))
    if kind == "qword":
        return ps_cast("uint64", int(value))
    if kind == "multi_string":
        items = [value] if isinstance(value, str) else list(value)
        return ps_cast("string[]", [str(item) for item in items])
    return str(value)


def _base_arguments(hive: str, key: str, name: str) -> dict[str, Any]:
    return {
        "hDefKey": ps_cast("uint32", HIVES[hive]),
        "sSubKeyName": key.strip("\\"),
        "sValueName": name,
    }


def get_registry_value(
    ex: Executors,
    context: ConnectionContext,
    hive: str,
    key: str,
    name: str,
    kind: str = "string",
) -> RegistryValue:
    """Read a value; a missing key or value yields exists=False rather than an error."""
    hive, kind = normalize_hive(hive), normalize_kind(kind)
    get_method, _, data_param = VALUE_KINDS[kind]

    result = ex.logic.invoke_method(
        context, NS_DEFAULT, "StdRegProv", get_method, _base_arguments(hive, key, name)
    )
    if result.return_value in _NOT_FOUND:
        return RegistryValue(hive=hive, key=key, name=name, kind=kind, value=None, exists=False)
    require_success(result, context, f"StdRegProv.{get_method}")
    return RegistryValue(hive=hive, key=key, name=name, kind=kind, value=result.outputs.get(data_param))


def set_registry_value(
    ex: Executors,
    context: ConnectionContext,
    hive: str,
    key: str,
    name: str,
    value: Any,
    kind: str = "string",
) -> RegistryValue:
    """Create the key if needed and write the value."""
    hive, kind = normalize_hive(hive), normalize_kind(kind)
    _, set_method, data_param = VALUE_KINDS[kind]

    logger.info("Setting %s\\%s\\%s on %s", hive, key, name, context.resolved_name)
    created = ex.logic.invoke_method(
        context,
        NS_DEFAULT,
        "StdRegProv",
        "CreateKey",
        {"hDefKey": ps_cast("uint32", HIVES[hive]), "sSubKeyName": key.strip("\\")},
    )
    require_success(created, context, "StdRegProv.CreateKey")

    arguments = _base_arguments(hive, key, name)
    arguments[data_param] = _data_argument(kind, value)
    result = ex.logic.invoke_method(context, NS_DEFAULT, "StdRegProv", set_method, arguments)
    require_success(result, context, f"StdRegProv.{set_method}")
    return RegistryValue(hive=hive, key=key, name=name, kind=kind, value=value)
