"""
PSRemote Client - opens PowerShell remoting sessions with pywinrm.

Tries transport and authentication combinations until one answers, and
hands back a PSSession owned by the caller.

Transport Priority:
1. HTTPS (5986) with certificate validation
2. HTTPS (5986) without certificate validation (if allowed)
3. HTTP (5985) (if allowed)

Auth Priority:
1. Negotiate (auto-selects Kerberos or NTLM)
2. Kerberos
3. NTLM
4. Basic (only over HTTPS without validation, never over HTTP)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import winrm  # pywinrm

from ccmclient.domain.errors import TransportError
from ccmclient.domain.sessions import PSSession
from ccmclient.domain.settings import WinRMSettings

logger = logging.getLogger(__name__)


class Transport(Enum):
    """WinRM transport protocols."""

    HTTPS = "https"
    HTTP = "http"


class AuthMethod(Enum):
    """WinRM authentication methods."""

    NEGOTIATE = "negotiate"
    KERBEROS = "kerberos"
    NTLM = "ntlm"
    BASIC = "basic"


@dataclass
class ConnectionAttempt:
    """One tried transport/auth combination."""

    transport: str
    auth: str
    verify_ssl: bool
    error: str = ""


@dataclass
class ConnectionPlan:
    """Ordered combinations to try for one host."""

    combos: list[tuple[Transport, AuthMethod, bool]] = field(default_factory=list)


def build_plan(settings: WinRMSettings) -> ConnectionPlan:
    """Combinations in priority order, filtered by what the settings allow."""
    secure_auths = [AuthMethod.NEGOTIATE, AuthMethod.KERBEROS, AuthMethod.NTLM]
    plan = ConnectionPlan()

    if settings.verify_ssl:
        plan.combos.extend((Transport.HTTPS, auth, True) for auth in secure_auths)
    if settings.allow_unverified_https or not settings.verify_ssl:
        plan.combos.extend(
            (Transport.HTTPS, auth, False) for auth in secure_auths + [AuthMethod.BASIC]
        )
    if settings.allow_http:
        plan.combos.extend((Transport.HTTP, auth, False) for auth in secure_auths)
    return plan


class PSRemoteClient:
    """
    Opens PSSessions to remote hosts.

    The client keeps no state between calls; every open_session() walks the
    plan from the top.
    """

    def __init__(
        self,
        settings: WinRMSettings | None = None,
        username: str | None = None,
        password: str | None = None,
    ) -> None:
        self.settings = settings or WinRMSettings()
        self.username = username
        self.password = password

    def open_session(self, hostname: str) -> PSSession:
        """
        Establish a session trying all allowed combinations.

        Raises:
            TransportError: If every combination failed
        """
        attempts: list[ConnectionAttempt] = []
        for transport, auth, verify_ssl in build_plan(self.settings).combos:
            attempt = ConnectionAttempt(transport.value, auth.value, verify_ssl)
            session = self._try_connect(hostname, transport, auth, verify_ssl, attempt)
            attempts.append(attempt)
            if session is None:
                continue

            if not verify_ssl and transport is Transport.HTTPS:
                logger.warning(
                    "Connected to %s with SSL verification DISABLED - not recommended for production",
                    hostname,
                )
            elif transport is Transport.HTTP:
                logger.warning("Connected to %s over HTTP", hostname)
            return PSSession(
                computer_name=hostname,
                connection=session,
                transport_used=transport.value,
                auth_used=auth.value,
            )

        logger.error("All %d connection attempts failed for %s", len(attempts), hostname)
        last_error = attempts[-1].error if attempts else "no transport allowed by settings"
        raise TransportError(
            f"Unable to open a PowerShell remoting session: {last_error}",
            computer_name=hostname,
            transport="pssession",
        )

    def _try_connect(
        self,
        hostname: str,
        transport: Transport,
        auth: AuthMethod,
        verify_ssl: bool,
        attempt: ConnectionAttempt,
    ) -> Any | None:
        """Try a single transport+auth combination; return the live winrm.Session or None."""
        port = self.settings.port_https if transport is Transport.HTTPS else self.settings.port_http
        endpoint = f"{transport.value}://{hostname}:{port}/wsman"

        logger.debug("Trying: %s with %s (SSL verify: %s)", endpoint, auth.value, verify_ssl)

        for number in range(self.settings.max_retries_per_combo):
            try:
                session = winrm.Session(
                    target=endpoint,
                    auth=(self.username, self.password),
                    transport=auth.value,
                    server_cert_validation="validate" if verify_ssl else "ignore",
                    operation_timeout_sec=self.settings.operation_timeout_sec,
                    read_timeout_sec=self.settings.read_timeout_sec,
                )

                result = session.run_cmd("echo", ["OK"])
                if result.status_code == 0 and b"OK" in result.std_out:
                    logger.info("Connected: %s %s + %s", hostname, transport.value, auth.value)
                    return session
                attempt.error = f"probe exited with {result.status_code}"

            except Exception as e:  # pywinrm surfaces requests/auth errors of many types
                attempt.error = f"{type(e).__name__}: {str(e)[:200]}"
                logger.debug("Attempt %d failed: %s", number + 1, attempt.error)

        return None
