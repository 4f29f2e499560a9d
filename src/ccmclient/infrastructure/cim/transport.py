"""
CIM transport over the local PowerShell host.

Get-CimInstance and Invoke-CimMethod are run locally and pointed at the
target with -ComputerName (bare hostname) or -CimSession (session handle);
no target means this machine. Results come back as JSON.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ccmclient.domain.errors import TransportError
from ccmclient.domain.sessions import CimProtocol, CimSession
from ccmclient.domain.transports import CimTarget
from ccmclient.infrastructure.powershell.runner import PowerShellOutput, PowerShellRunner
from ccmclient.infrastructure.powershell.scripts import (
    METADATA_PROPERTIES,
    PROLOGUE,
    RESULT_DEPTH,
    as_list,
    parse_json_output,
    ps_credential,
    ps_literal,
    ps_quote,
    ps_string_array,
    strip_metadata,
)

logger = logging.getLogger(__name__)


def _target_name(target: CimTarget) -> str:
    if target is None:
        return "localhost"
    if isinstance(target, CimSession):
        return target.computer_name
    return target


def _bind_target(target: CimTarget) -> list[str]:
    """Lines that point `$__params` at the target (run inside the try block)."""
    if target is None:
        return []
    if isinstance(target, str):
        return [f"$__params['ComputerName'] = {ps_quote(target)}"]

    if not target.is_available:
        raise TransportError(
            f"CIM session {target.session_id} is {target.state.value}",
            computer_name=target.computer_name,
            transport="cim",
        )

    lines = []
    session_args = [f"-ComputerName {ps_quote(target.computer_name)}"]
    if target.username and target.password:
        lines.append(ps_credential(target.username, target.password))
        session_args.append("-Credential $credential")
    if target.protocol is CimProtocol.DCOM:
        lines.append("$__options = New-CimSessionOption -Protocol Dcom")
        session_args.append("-SessionOption $__options")
    lines.append(f"$__session = New-CimSession {' '.join(session_args)}")
    lines.append("$__params['CimSession'] = $__session")
    return lines


def _indent(lines: Sequence[str]) -> list[str]:
    return ["    " + line for block in lines for line in block.splitlines()]


def _assemble(setup: Sequence[str], target: CimTarget, body: Sequence[str]) -> str:
    lines = list(PROLOGUE)
    lines.extend(setup)
    lines.append("$__session = $null")
    lines.append("try {")
    lines.extend(_indent(_bind_target(target)))
    lines.extend(_indent(body))
    lines.append("} finally {")
    lines.append("    if ($__session) { Remove-CimSession -CimSession $__session }")
    lines.append("}")
    return "\n".join(lines)


def build_query_script(
    namespace: str,
    class_name: Optional[str],
    filter: Optional[str],  # pylint: disable=redefined-builtin
    raw_query: Optional[str],
    properties: Optional[Sequence[str]],
    target: CimTarget,
) -> str:
    """Script running Get-CimInstance and printing a JSON array."""
    setup = [f"$__params = @{{ Namespace = {ps_quote(namespace)} }}"]
    if raw_query:
        setup.append(f"$__params['Query'] = {ps_quote(raw_query)}")
    else:
        setup.append(f"$__params['ClassName'] = {ps_quote(class_name or '')}")
        if filter:
            setup.append(f"$__params['Filter'] = {ps_quote(filter)}")

    if properties:
        select = f"Select-Object -Property {ps_string_array(properties)}"
    else:
        select = (
            "Select-Object -Property * -ExcludeProperty "
            f"{ps_string_array(METADATA_PROPERTIES)}"
        )

    body = [
        f"$__items = @(Get-CimInstance @__params | {select})",
        f"ConvertTo-Json -InputObject $__items -Depth {RESULT_DEPTH} -Compress",
    ]
    return _assemble(setup, target, body)


def build_method_script(
    namespace: str,
    class_name: str,
    method: str,
    arguments: Mapping[str, Any],
    target: CimTarget,
) -> str:
    """Script running Invoke-CimMethod and printing ReturnValue plus out parameters."""
    setup = [
        "$__params = @{",
        f"    Namespace = {ps_quote(namespace)}",
        f"    ClassName = {ps_quote(class_name)}",
        f"    MethodName = {ps_quote(method)}",
        f"    Arguments = {ps_literal(dict(arguments))}",
        "}",
    ]
    body = [
        "$__out = Invoke-CimMethod @__params",
        "$__data = [ordered]@{ ReturnValue = $__out.ReturnValue }",
        "foreach ($__p in $__out.OutParameters) { $__data[$__p.Name] = $__p.Value }",
        f"ConvertTo-Json -InputObject ([pscustomobject]$__data) -Depth {RESULT_DEPTH} -Compress",
    ]
    return _assemble(setup, target, body)


class PowerShellCimTransport:
    """
    Structured-query transport.

    One PowerShell invocation per call, no retries.
    """

    def __init__(self, runner: PowerShellRunner) -> None:
        self.runner = runner

    def query(
        self,
        namespace: str,
        class_name: Optional[str],
        filter: Optional[str],  # pylint: disable=redefined-builtin
        raw_query: Optional[str],
        properties: Optional[Sequence[str]],
        target: CimTarget,
    ) -> list[dict[str, Any]]:
        """
        Enumerate CIM instances.

        Returns:
            List of property dicts, empty when nothing matched

        Raises:
            TransportError: If the cmdlet faulted or printed no JSON
        """
        name = _target_name(target)
        script = build_query_script(namespace, class_name, filter, raw_query, properties, target)
        logger.debug("CIM query on %s: %s %s", name, namespace, raw_query or class_name)
        data = self._execute(script, name)
        return [strip_metadata(item) for item in as_list(data)]

    def invoke_method(
        self,
        namespace: str,
        class_name: str,
        method: str,
        arguments: Mapping[str, Any],
        target: CimTarget,
    ) -> dict[str, Any]:
        """Invoke a static CIM method and return ReturnValue plus out parameters."""
        name = _target_name(target)
        script = build_method_script(namespace, class_name, method, arguments, target)
        logger.debug("CIM method on %s: %s:%s.%s", name, namespace, class_name, method)
        data = self._execute(script, name)
        if isinstance(data, list):
            data = data[0] if data else None
        return dict(data or {})

    def _execute(self, script: str, computer_name: str) -> Any:
        output = self.runner.run(script)
        if not output.success:
            raise self._error(output, computer_name)
        try:
            return parse_json_output(output.stdout)
        except ValueError as e:
            raise TransportError(
                str(e), computer_name=computer_name, transport="cim", stderr=output.stderr
            ) from e

    @staticmethod
    def _error(output: PowerShellOutput, computer_name: str) -> TransportError:
        return TransportError(
            output.error_text,
            computer_name=computer_name,
            transport="cim",
            stderr=output.stderr,
        )
