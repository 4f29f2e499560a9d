"""
Shared fixtures - fake transports recording every call.

Nothing here starts PowerShell or talks WinRM; the fakes return canned
records keyed by class and method name.
"""

from __future__ import annotations

from typing import Any, Callable, Optional
from unittest.mock import Mock

import pytest

from ccmclient.application.features.base import Executors
from ccmclient.application.logic_executor import RemoteLogicExecutor
from ccmclient.application.query_executor import CimQueryExecutor
from ccmclient.application.resolver import TargetResolver
from ccmclient.application.toolkit import CCMClientToolkit
from ccmclient.domain.errors import TransportError
from ccmclient.domain.sessions import CimSession, PSSession
from ccmclient.infrastructure.sessions import SessionRegistry

LOCAL_NAME = "WORKSTATION01"
LOCAL_FQDN = "WORKSTATION01.corp.example.com"


class FakeCimTransport:
    """CimTransport double; `queries` and `methods` hold canned answers."""

    def __init__(self) -> None:
        self.queries: dict[str, list[dict]] = {}
        self.methods: dict[tuple[str, str], dict] = {}
        self.failures: dict[str, str] = {}
        self.query_calls: list[dict[str, Any]] = []
        self.method_calls: list[dict[str, Any]] = []

    @property
    def calls(self) -> int:
        return len(self.query_calls) + len(self.method_calls)

    def _check(self, target) -> None:
        name = target.computer_name if isinstance(target, CimSession) else target
        if name in self.failures:
            raise TransportError(self.failures[name], computer_name=name, transport="cim")

    def query(self, namespace, class_name, filter, raw_query, properties, target):  # pylint: disable=redefined-builtin
        self.query_calls.append({
            "namespace": namespace,
            "class_name": class_name,
            "filter": filter,
            "raw_query": raw_query,
            "properties": properties,
            "target": target,
        })
        self._check(target)
        return [dict(record) for record in self.queries.get(class_name, [])]

    def invoke_method(self, namespace, class_name, method, arguments, target):
        self.method_calls.append({
            "namespace": namespace,
            "class_name": class_name,
            "method": method,
            "arguments": dict(arguments),
            "target": target,
        })
        self._check(target)
        return dict(self.methods.get((class_name, method), {"ReturnValue": 0}))


class FakeShellTransport:
    """ShellTransport double; `handler` computes the output of each call."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.handler: Optional[Callable[[str, tuple, Optional[PSSession]], list]] = None
        self.outputs: list[Any] = []

    def invoke(self, body, arguments, session):
        self.calls.append({"body": body, "arguments": tuple(arguments), "session": session})
        if self.handler is not None:
            return self.handler(body, tuple(arguments), session)
        return list(self.outputs)


def make_ps_session(computer_name: str, connection: Any = None) -> PSSession:
    """Open PSSession over a mock pywinrm connection."""
    return PSSession(computer_name=computer_name, connection=connection or Mock(), transport_used="https")


@pytest.fixture
def cim_transport() -> FakeCimTransport:
    return FakeCimTransport()


@pytest.fixture
def shell_transport() -> FakeShellTransport:
    return FakeShellTransport()


@pytest.fixture
def logic_executor(shell_transport, cim_transport) -> RemoteLogicExecutor:
    return RemoteLogicExecutor(shell_transport, cim_transport)


@pytest.fixture
def query_executor(cim_transport, logic_executor) -> CimQueryExecutor:
    return CimQueryExecutor(cim_transport, logic_executor)


@pytest.fixture
def executors(query_executor, logic_executor) -> Executors:
    return Executors(query=query_executor, logic=logic_executor)


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def resolver(registry) -> TargetResolver:
    return TargetResolver.from_registry(
        registry, local_name_provider=lambda: LOCAL_NAME, local_fqdn_provider=lambda: LOCAL_FQDN
    )


@pytest.fixture
def toolkit(resolver, query_executor, logic_executor) -> CCMClientToolkit:
    return CCMClientToolkit(resolver, query_executor, logic_executor)
