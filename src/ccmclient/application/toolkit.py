"""
Toolkit service - the multi-target entry point for every operation.

Each method takes targets (hostnames or session handles) plus an optional
transport preference and returns one ResultRecord per target. Argument
errors that would fail every target identically (unknown schedule, bad
hive) are raised before any target is contacted.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from ccmclient.application import features
from ccmclient.application.batch import run_per_target
from ccmclient.application.features.base import Executors
from ccmclient.application.features.inventory import inventory_cycle_id
from ccmclient.application.features.registry import normalize_hive, normalize_kind
from ccmclient.application.features.schedules import resolve_schedule
from ccmclient.application.logic_executor import RemoteLogicExecutor
from ccmclient.application.query_executor import CimQueryExecutor
from ccmclient.application.resolver import TargetResolver
from ccmclient.domain.context import ConnectionContext
from ccmclient.domain.requests import CimQuery, ScriptLogic
from ccmclient.domain.results import ResultRecord
from ccmclient.domain.targets import Target, TransportPreference

logger = logging.getLogger(__name__)

Targets = Iterable[Union[Target, str]]
Preference = Optional[TransportPreference]


class CCMClientToolkit:
    """
    Runs queries, logic and client actions across many targets.

    Targets are processed sequentially in input order and resolved afresh
    for every call.
    """

    def __init__(
        self,
        resolver: TargetResolver,
        query_executor: CimQueryExecutor,
        logic_executor: RemoteLogicExecutor,
        default_preference: TransportPreference | None = None,
    ) -> None:
        self.resolver = resolver
        self.executors = Executors(query=query_executor, logic=logic_executor)
        self.default_preference = default_preference

    def _batch(
        self,
        targets: Targets,
        operation: Callable[..., Any],
        preference: TransportPreference | None,
        operation_name: str,
        **kwargs: Any,
    ) -> list[ResultRecord]:
        return run_per_target(
            self.resolver,
            targets,
            partial(operation, self.executors, **kwargs),
            preference or self.default_preference,
            operation_name,
        )

    # Core primitives

    def resolve(self, target: Target | str, preference: TransportPreference | None = None) -> ConnectionContext:
        return self.resolver.resolve(target, preference or self.default_preference)

    def query(
        self,
        targets: Targets,
        request: CimQuery,
        preference: TransportPreference | None = None,
    ) -> list[ResultRecord]:
        """Structured query on every target; each payload is a list of dicts."""
        return run_per_target(
            self.resolver,
            targets,
            lambda context: self.executors.query.query(context, request),
            preference or self.default_preference,
            f"query {request.describe()}",
        )

    def run(
        self,
        targets: Targets,
        logic: ScriptLogic,
        preference: TransportPreference | None = None,
    ) -> list[ResultRecord]:
        """Script logic on every target; CIM-only targets fail with UnsupportedTransport."""
        return run_per_target(
            self.resolver,
            targets,
            lambda context: self.executors.logic.run(context, logic),
            preference or self.default_preference,
            "run",
        )

    def invoke_method(
        self,
        targets: Targets,
        namespace: str,
        class_name: str,
        method: str,
        arguments: Mapping[str, Any] | None = None,
        preference: TransportPreference | None = None,
    ) -> list[ResultRecord]:
        """Static CIM method on every target; each payload is a MethodResult."""
        return run_per_target(
            self.resolver,
            targets,
            lambda context: self.executors.logic.invoke_method(
                context, namespace, class_name, method, arguments
            ),
            preference or self.default_preference,
            f"{class_name}.{method}",
        )

    # Client

    def get_client_info(self, targets: Targets, preference: Preference = None) -> list[ResultRecord]:
        return self._batch(targets, features.get_client_info, preference, "client info")

    def get_provisioning_mode(self, targets: Targets, preference: Preference = None) -> list[ResultRecord]:
        return self._batch(targets, features.get_provisioning_mode, preference, "provisioning mode")

    def set_provisioning_mode(self, targets: Targets, enabled: bool, preference: Preference = None) -> list[ResultRecord]:
        return self._batch(
            targets, features.set_provisioning_mode, preference, "set provisioning mode", enabled=enabled
        )

    # Inventory and schedules

    def get_inventory_status(self, targets: Targets, preference: Preference = None) -> list[ResultRecord]:
        return self._batch(targets, features.get_inventory_status, preference, "inventory status")

    def trigger_inventory(
        self,
        targets: Targets,
        cycle: str = "HardwareInventory",
        full: bool = False,
        preference: Preference = None,
    ) -> list[ResultRecord]:
        name, _ = inventory_cycle_id(cycle)
        return self._batch(
            targets, features.trigger_inventory, preference, f"trigger {name}", cycle=name, full=full
        )

    def trigger_schedule(self, targets: Targets, schedule: str, preference: Preference = None) -> list[ResultRecord]:
        name, _ = resolve_schedule(schedule)
        return self._batch(targets, features.trigger_schedule, preference, f"trigger {name}", schedule=schedule)

    # Cache

    def get_cache_info(self, targets: Targets, preference: Preference = None) -> list[ResultRecord]:
        return self._batch(targets, features.get_cache_info, preference, "cache info")

    def get_cache_content(self, targets: Targets, preference: Preference = None) -> list[ResultRecord]:
        return self._batch(targets, features.get_cache_content, preference, "cache content")

    def set_cache_size(self, targets: Targets, size_mb: int, preference: Preference = None) -> list[ResultRecord]:
        if size_mb <= 0:
            raise ValueError("Cache size must be positive")
        return self._batch(targets, features.set_cache_size, preference, "set cache size", size_mb=size_mb)

    def clear_cache(
        self,
        targets: Targets,
        content_ids: Optional[Sequence[str]] = None,
        preference: Preference = None,
    ) -> list[ResultRecord]:
        return self._batch(targets, features.clear_cache, preference, "clear cache", content_ids=content_ids)

    # Software

    def get_applications(self, targets: Targets, preference: Preference = None) -> list[ResultRecord]:
        return self._batch(targets, features.get_applications, preference, "applications")

    def install_application(self, targets: Targets, app_id: str, preference: Preference = None) -> list[ResultRecord]:
        if not app_id.strip():
            raise ValueError("Application ID must not be empty")
        return self._batch(targets, features.install_application, preference, "install application", app_id=app_id)

    def get_software_updates(self, targets: Targets, preference: Preference = None) -> list[ResultRecord]:
        return self._batch(targets, features.get_software_updates, preference, "software updates")

    def install_software_updates(
        self,
        targets: Targets,
        article_ids: Optional[Sequence[str]] = None,
        preference: Preference = None,
    ) -> list[ResultRecord]:
        return self._batch(
            targets, features.install_software_updates, preference, "install updates", article_ids=article_ids
        )

    # Maintenance windows

    def get_maintenance_windows(self, targets: Targets, preference: Preference = None) -> list[ResultRecord]:
        return self._batch(targets, features.get_maintenance_windows, preference, "maintenance windows")

    # Registry

    def get_registry_value(
        self,
        targets: Targets,
        hive: str,
        key: str,
        name: str,
        kind: str = "string",
        preference: Preference = None,
    ) -> list[ResultRecord]:
        hive, kind = normalize_hive(hive), normalize_kind(kind)
        return self._batch(
            targets, features.get_registry_value, preference, "registry read",
            hive=hive, key=key, name=name, kind=kind,
        )

    def set_registry_value(
        self,
        targets: Targets,
        hive: str,
        key: str,
        name: str,
        value: Any,
        kind: str = "string",
        preference: Preference = None,
    ) -> list[ResultRecord]:
        hive, kind = normalize_hive(hive), normalize_kind(kind)
        if kind in ("dword", "qword"):
            value = int(value)
        return self._batch(
            targets, features.set_registry_value, preference, "registry write",
            hive=hive, key=key, name=name, value=value, kind=kind,
        )
