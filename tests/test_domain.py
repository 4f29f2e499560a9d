"""
Tests for domain models - targets, contexts, requests, results and sessions.
"""

import pytest
from pydantic import ValidationError

from ccmclient.domain.context import (
    CimSessionParams,
    ComputerNameParams,
    ConnectionContext,
    LocalParams,
    PSSessionParams,
)
from ccmclient.domain.errors import CCMClientError, ResolutionDegraded, TransportError
from ccmclient.domain.requests import CimQuery, MethodResult, PSTyped, ScriptLogic
from ccmclient.domain.results import ResultRecord
from ccmclient.domain.sessions import CimSession, SessionState
from ccmclient.domain.targets import (
    Hostname,
    TransportKind,
    TransportPreference,
    as_target,
    is_local_name,
    target_name,
)
from ccmclient.infrastructure.sessions import SessionRegistry

from conftest import make_ps_session


class TestTargets:
    """Target identities."""

    def test_hostname_is_stripped(self):
        assert Hostname("  SRV01 ").name == "SRV01"

    def test_empty_hostname(self):
        with pytest.raises(ValueError):
            Hostname("")

    def test_as_target(self):
        session = CimSession(computer_name="SRV01")
        assert as_target("SRV01") == Hostname("SRV01")
        assert as_target(session) is session
        assert target_name(session) == "SRV01"

    def test_preference_other(self):
        assert TransportPreference.CIM_SESSION.other is TransportPreference.PS_SESSION
        assert TransportPreference.PS_SESSION.other is TransportPreference.CIM_SESSION
        assert TransportPreference.PS_SESSION.kind is TransportKind.PS_SESSION

    @pytest.mark.parametrize(
        "name, local, fqdn, expected",
        [
            ("localhost", "", "", True),
            ("(local)", "SRV01", "", True),
            ("srv01", "SRV01", "", True),
            ("SRV01.corp.example.com", "srv01", "srv01.corp.example.com", True),
            ("SRV01.corp.example.com", "srv01", "", False),
            ("srv01", "srv01.corp.example.com", "", True),
            ("srv01", "SRV01-NB", "srv01.corp.example.com", True),
            ("web01.prod.contoso.com", "web01.lab.example", "web01.lab.example", False),
            ("SRV02", "SRV01", "", False),
            ("", "SRV01", "", False),
        ],
    )
    def test_is_local_name(self, name, local, fqdn, expected):
        assert is_local_name(name, local, fqdn) is expected


class TestConnectionContext:
    """Tagged union of transport kind and parameters."""

    def test_params_must_match_kind(self):
        with pytest.raises(TypeError):
            ConnectionContext("SRV01", TransportKind.LOCAL, ComputerNameParams("SRV01"))
        with pytest.raises(TypeError):
            ConnectionContext("SRV01", TransportKind.PS_SESSION, CimSessionParams(CimSession(computer_name="SRV01")))
        with pytest.raises(TypeError):
            ConnectionContext("SRV01", TransportKind.CIM_SESSION, PSSessionParams(make_ps_session("SRV01")))

    def test_labels(self):
        assert ConnectionContext.local("me").transport_label == "local"
        assert ConnectionContext("SRV01", TransportKind.CIM_SESSION, ComputerNameParams("SRV01")).transport_label == "cim-hostname"

    def test_local_factory(self):
        context = ConnectionContext.local("localhost")
        assert context.params == LocalParams()
        assert context.is_local


class TestRequests:
    """Query and logic request validation."""

    def test_query_needs_class_or_raw(self):
        with pytest.raises(ValidationError):
            CimQuery()
        with pytest.raises(ValidationError):
            CimQuery(class_name="A", raw_query="SELECT * FROM A")

    def test_query_describe(self):
        assert CimQuery(namespace="root\\ccm", class_name="SMS_Client").describe() == "root\\ccm:SMS_Client"
        assert "WHERE Name='x'" in CimQuery(class_name="C", filter="Name='x'").describe()

    def test_logic_body_required(self):
        with pytest.raises(ValidationError):
            ScriptLogic(body="")

    @pytest.mark.parametrize("arguments", [
        ({1, 2},),
        ([1, object()],),
        ({"Name": b"bytes"},),
        (PSTyped("uint32", {3}),),
    ])
    def test_logic_rejects_unrenderable_arguments(self, arguments):
        with pytest.raises(ValidationError, match="unsupported type"):
            ScriptLogic(body="param($a) $a", arguments=arguments)

    def test_logic_accepts_nested_arguments(self):
        arguments = (None, True, 3, 1.5, "x", [1, ("a", "b")], {"hDefKey": PSTyped("uint32", 2)})

        logic = ScriptLogic(body="param($a) $a", arguments=arguments)

        assert logic.arguments == arguments

    def test_method_result(self):
        result = MethodResult.from_output({"ReturnValue": 2, "sValue": None})
        assert result.return_value == 2
        assert not result.succeeded
        assert result.outputs == {"sValue": None}

        assert MethodResult.from_output(None).succeeded
        assert MethodResult.from_output([]).return_value is None


class TestResultRecord:
    """Per-target result records."""

    def test_failed_uses_error_message(self):
        record = ResultRecord.failed("SRV01", TransportError("refused", computer_name="SRV01"), "cim")
        assert record.error == "refused"
        assert record.error_kind == "TransportError"
        assert not record.success

    def test_failed_plain_exception(self):
        assert ResultRecord.failed("SRV01", RuntimeError()).error == "RuntimeError"

    def test_error_str_includes_computer(self):
        assert str(CCMClientError("boom", computer_name="SRV01")) == "[SRV01] boom"

    def test_degraded_str(self):
        note = ResolutionDegraded("SRV01", "pssession", "cim", "no open pssession session")
        assert str(note) == "SRV01: preferred pssession, resolved cim (no open pssession session)"


class TestSessionRegistry:
    """Caller-side pool of open sessions."""

    def setup_method(self):
        self.registry = SessionRegistry()

    def test_register_and_find(self):
        cim = CimSession(computer_name="SRV01")
        ps = make_ps_session("SRV01")
        self.registry.register(cim)
        self.registry.register(ps)
        self.registry.register(ps)

        assert len(self.registry) == 2
        assert self.registry.find_cim_session("srv01") is cim
        assert self.registry.find_ps_session("SRV01") is ps
        assert self.registry.find_ps_session("SRV02") is None

    def test_register_rejects_non_sessions(self):
        with pytest.raises(TypeError):
            self.registry.register("SRV01")

    def test_unregister(self):
        ps = make_ps_session("SRV01")
        self.registry.register(ps)
        self.registry.unregister(ps)
        assert self.registry.find_ps_session("SRV01") is None

    def test_close_all(self):
        cim = CimSession(computer_name="SRV01")
        ps = make_ps_session("SRV02")
        self.registry.register(cim)
        self.registry.register(ps)

        self.registry.close_all()

        assert len(self.registry) == 0
        assert cim.state is SessionState.CLOSED
        assert ps.state is SessionState.CLOSED
        assert ps.connection is None
