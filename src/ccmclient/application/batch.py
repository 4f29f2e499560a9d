"""
Per-target batch runner.

Resolves each target, runs the operation on its context and records one
ResultRecord per target, in input order. A failing target never stops the
targets after it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from ccmclient.application.resolver import TargetResolver
from ccmclient.domain.context import ConnectionContext
from ccmclient.domain.errors import CCMClientError
from ccmclient.domain.results import ResultRecord
from ccmclient.domain.targets import Target, TransportPreference

logger = logging.getLogger(__name__)

Operation = Callable[[ConnectionContext], Any]


def _display_name(target: Any) -> str:
    return str(getattr(target, "computer_name", None) or getattr(target, "name", None) or target)


def run_per_target(
    resolver: TargetResolver,
    targets: Iterable[Target | str],
    operation: Operation,
    preference: TransportPreference | None = None,
    operation_name: str = "operation",
) -> list[ResultRecord]:
    """
    Run `operation` once per target, sequentially.

    Args:
        resolver: Resolves each target afresh
        targets: Hostnames or session handles, in the order results are wanted
        operation: Callable receiving the target's ConnectionContext
        preference: Transport tie-break passed to the resolver
        operation_name: Label for log lines

    Returns:
        One ResultRecord per target
    """
    records: list[ResultRecord] = []

    for target in targets:
        try:
            context = resolver.resolve(target, preference)
        except (ValueError, TypeError) as e:
            logger.error("%s: cannot resolve target %r: %s", operation_name, target, e)
            records.append(ResultRecord.failed(_display_name(target), e))
            continue

        degraded = str(context.degraded) if context.degraded else None
        try:
            payload = operation(context)
        except CCMClientError as e:
            logger.error("%s failed on %s: %s", operation_name, context.resolved_name, e.message)
            records.append(
                ResultRecord.failed(context.resolved_name, e, context.transport_label, degraded)
            )
            continue
        except Exception as e:  # per-target boundary: record and keep going
            logger.exception("%s raised unexpectedly on %s", operation_name, context.resolved_name)
            records.append(
                ResultRecord.failed(context.resolved_name, e, context.transport_label, degraded)
            )
            continue

        logger.info("%s succeeded on %s (%s)", operation_name, context.resolved_name, context.transport_label)
        records.append(
            ResultRecord.ok(context.resolved_name, payload, context.transport_label, degraded)
        )

    return records
