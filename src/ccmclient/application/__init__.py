"""
Application layer package.

Target resolution, the query and logic executors, the per-target batch
runner and the toolkit service built on them.
"""

from ccmclient.application.batch import run_per_target
from ccmclient.application.logic_executor import RemoteLogicExecutor
from ccmclient.application.query_executor import CimQueryExecutor
from ccmclient.application.resolver import TargetResolver
from ccmclient.application.toolkit import CCMClientToolkit

__all__ = [
    "CCMClientToolkit",
    "CimQueryExecutor",
    "RemoteLogicExecutor",
    "TargetResolver",
    "run_per_target",
]
