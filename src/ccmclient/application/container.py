"""
Dependency injection container for the toolkit.

Builds settings, transports, the session registry, executors and the
toolkit service lazily, each at most once.
"""

import logging
from pathlib import Path
from typing import Optional

from ccmclient.application.logic_executor import RemoteLogicExecutor
from ccmclient.application.query_executor import CimQueryExecutor
from ccmclient.application.resolver import TargetResolver
from ccmclient.application.toolkit import CCMClientToolkit
from ccmclient.domain.settings import ToolkitSettings
from ccmclient.infrastructure.cim import PowerShellCimTransport
from ccmclient.infrastructure.config import ConfigManager
from ccmclient.infrastructure.powershell import PowerShellRunner
from ccmclient.infrastructure.psremote import PSRemoteClient, WinRMShellTransport
from ccmclient.infrastructure.sessions import SessionRegistry

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    Tests swap pieces by assigning the private attributes before first use.
    """

    def __init__(self, config_dir: Optional[Path] = None, settings: Optional[ToolkitSettings] = None):
        """
        Args:
            config_dir: Directory holding ccmclient.json(c); defaults to ./config
            settings: Settings override; skips loading the config file
        """
        self.config_dir = config_dir or Path.cwd() / "config"

        self._settings: Optional[ToolkitSettings] = settings
        self._config_manager: Optional[ConfigManager] = None
        self._runner: Optional[PowerShellRunner] = None
        self._cim_transport: Optional[PowerShellCimTransport] = None
        self._shell_transport: Optional[WinRMShellTransport] = None
        self._session_registry: Optional[SessionRegistry] = None
        self._resolver: Optional[TargetResolver] = None
        self._query_executor: Optional[CimQueryExecutor] = None
        self._logic_executor: Optional[RemoteLogicExecutor] = None
        self._toolkit: Optional[CCMClientToolkit] = None
        self._psremote_client: Optional[PSRemoteClient] = None

    @property
    def config_manager(self) -> ConfigManager:
        if self._config_manager is None:
            self._config_manager = ConfigManager(self.config_dir)
        return self._config_manager

    @property
    def settings(self) -> ToolkitSettings:
        """Settings from the config file, or defaults when there is none."""
        if self._settings is None:
            self._settings = self.config_manager.load_settings()
        return self._settings

    @property
    def runner(self) -> PowerShellRunner:
        if self._runner is None:
            self._runner = PowerShellRunner(
                self.settings.powershell_executable, self.settings.local_timeout_seconds
            )
        return self._runner

    @property
    def cim_transport(self) -> PowerShellCimTransport:
        if self._cim_transport is None:
            self._cim_transport = PowerShellCimTransport(self.runner)
        return self._cim_transport

    @property
    def shell_transport(self) -> WinRMShellTransport:
        if self._shell_transport is None:
            self._shell_transport = WinRMShellTransport(self.runner)
        return self._shell_transport

    @property
    def session_registry(self) -> SessionRegistry:
        """Open sessions the resolver may pick up for hostname targets."""
        if self._session_registry is None:
            self._session_registry = SessionRegistry()
        return self._session_registry

    @property
    def resolver(self) -> TargetResolver:
        if self._resolver is None:
            self._resolver = TargetResolver.from_registry(self.session_registry)
        return self._resolver

    @property
    def logic_executor(self) -> RemoteLogicExecutor:
        if self._logic_executor is None:
            self._logic_executor = RemoteLogicExecutor(self.shell_transport, self.cim_transport)
        return self._logic_executor

    @property
    def query_executor(self) -> CimQueryExecutor:
        if self._query_executor is None:
            self._query_executor = CimQueryExecutor(self.cim_transport, self.logic_executor)
        return self._query_executor

    @property
    def toolkit(self) -> CCMClientToolkit:
        if self._toolkit is None:
            self._toolkit = CCMClientToolkit(
                self.resolver,
                self.query_executor,
                self.logic_executor,
                self.settings.default_preference,
            )
        return self._toolkit

    @property
    def psremote_client(self) -> PSRemoteClient:
        """Session opener using the configured WinRM settings and credentials."""
        if self._psremote_client is None:
            self._psremote_client = PSRemoteClient(
                self.settings.winrm,
                self.settings.username,
                self.settings.resolve_password(),
            )
        return self._psremote_client

    def close(self) -> None:
        """Close every registered session."""
        if self._session_registry is not None and len(self._session_registry):
            logger.debug("Closing %d registered session(s)", len(self._session_registry))
            self._session_registry.close_all()
