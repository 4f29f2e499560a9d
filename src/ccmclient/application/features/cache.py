"""
Client cache - configuration, content listing, resizing and clearing.

Reads are plain CIM queries. Resizing and clearing go through the
UIResource.UIResourceMgr COM object, so they need script logic (local or
PSSession); CIM-only targets get UnsupportedTransport.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ccmclient.application.features.base import (
    NS_SOFTMGMT,
    Executors,
    parse_cim_datetime,
    to_bool,
    to_int,
    to_str,
)
from ccmclient.domain.client_models import CacheElement, CacheInfo
from ccmclient.domain.context import ConnectionContext
from ccmclient.domain.requests import CimQuery, ScriptLogic

logger = logging.getLogger(__name__)

SET_CACHE_SIZE_BODY = """
param($SizeMB)
$ui = New-Object -ComObject UIResource.UIResourceMgr
$cache = $ui.GetCacheInfo()
$cache.TotalSize = [int]$SizeMB
[pscustomobject]@{ Location = $cache.Location; TotalSize = $cache.TotalSize; FreeSize = $cache.FreeSize }
"""

CLEAR_CACHE_BODY = """
param($ContentIds)
$ui = New-Object -ComObject UIResource.UIResourceMgr
$cache = $ui.GetCacheInfo()
foreach ($element in @($cache.GetCacheElements())) {
    if (-not $ContentIds -or $ContentIds -contains $element.ContentID) {
        $cache.DeleteCacheElementEx([string]$element.CacheElementID, $true)
        [string]$element.ContentID
    }
}
"""


def get_cache_info(ex: Executors, context: ConnectionContext) -> CacheInfo:
    records = ex.query.query(context, CimQuery(namespace=NS_SOFTMGMT, class_name="CacheConfig"))
    if not records:
        return CacheInfo()
    record = records[0]
    return CacheInfo(
        location=to_str(record.get("Location")),
        size_mb=to_int(record.get("Size")),
        in_use=to_bool(record.get("InUse")),
    )


def get_cache_content(ex: Executors, context: ConnectionContext) -> list[CacheElement]:
    records = ex.query.query(context, CimQuery(namespace=NS_SOFTMGMT, class_name="CacheInfoEx"))
    return [
        CacheElement(
            cache_id=to_str(record.get("CacheId")),
            content_id=to_str(record.get("ContentId")),
            content_version=to_str(record.get("ContentVer")),
            location=to_str(record.get("Location")),
            size_kb=to_int(record.get("ContentSize")),
            last_referenced=parse_cim_datetime(record.get("LastReferenced")),
            persist=to_bool(record.get("PersistInCache")),
        )
        for record in records
    ]


def set_cache_size(ex: Executors, context: ConnectionContext, size_mb: int) -> CacheInfo:
    """
    Resize the cache.

    Raises:
        ValueError: If size_mb is not positive
        UnsupportedTransport: On a CIM-only context
    """
    if size_mb <= 0:
        raise ValueError("Cache size must be positive")
    logger.info("Setting cache size to %d MB on %s", size_mb, context.resolved_name)
    output = ex.logic.run(context, ScriptLogic(body=SET_CACHE_SIZE_BODY, arguments=(size_mb,)))
    output = output if isinstance(output, dict) else {}
    return CacheInfo(
        location=to_str(output.get("Location")),
        size_mb=to_int(output.get("TotalSize")),
        free_mb=to_int(output.get("FreeSize")),
    )


def clear_cache(
    ex: Executors,
    context: ConnectionContext,
    content_ids: Optional[Sequence[str]] = None,
) -> list[str]:
    """
    Delete cache elements, all of them or only those with the given content IDs.

    Returns:
        Content IDs of the removed elements
    """
    wanted = list(content_ids) if content_ids else None
    logger.info(
        "Clearing %s from cache on %s",
        ", ".join(wanted) if wanted else "all content",
        context.resolved_name,
    )
    removed = ex.logic.run_collect(context, ScriptLogic(body=CLEAR_CACHE_BODY, arguments=(wanted,)))
    return [str(item) for item in removed]
