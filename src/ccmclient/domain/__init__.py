"""
Domain layer - targets, session handles, contexts, requests, results, errors.

Pure data and rules; no transport code lives here.
"""

from ccmclient.domain.context import (
    CimSessionParams,
    ComputerNameParams,
    ConnectionContext,
    LocalParams,
    PSSessionParams,
    ResolutionState,
)
from ccmclient.domain.errors import (
    CCMClientError,
    LocalExecutionFault,
    MethodCallFailed,
    ResolutionDegraded,
    TransportError,
    UnsupportedTransport,
)
from ccmclient.domain.requests import CimQuery, MethodResult, ScriptLogic
from ccmclient.domain.results import ResultRecord
from ccmclient.domain.sessions import CimProtocol, CimSession, PSSession, SessionState
from ccmclient.domain.targets import Hostname, Target, TransportKind, TransportPreference

__all__ = [
    "CCMClientError",
    "CimProtocol",
    "CimQuery",
    "CimSession",
    "CimSessionParams",
    "ComputerNameParams",
    "ConnectionContext",
    "Hostname",
    "LocalExecutionFault",
    "LocalParams",
    "MethodCallFailed",
    "MethodResult",
    "PSSession",
    "PSSessionParams",
    "ResolutionDegraded",
    "ResolutionState",
    "ResultRecord",
    "ScriptLogic",
    "SessionState",
    "Target",
    "TransportError",
    "TransportKind",
    "TransportPreference",
    "UnsupportedTransport",
]
