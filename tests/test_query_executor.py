"""
Tests for the structured-query executor.
"""

from ccmclient.application.query_executor import REMOTE_QUERY_BODY
from ccmclient.domain.context import ComputerNameParams, ConnectionContext, PSSessionParams
from ccmclient.domain.requests import CimQuery
from ccmclient.domain.targets import TransportKind
from ccmclient.infrastructure.powershell.scripts import METADATA_PROPERTIES

from conftest import make_ps_session


class TestCimQueryExecutor:
    """Queries over the CIM transport and over PSSessions."""

    def test_filter_and_properties_reach_transport(self, query_executor, cim_transport):
        context = ConnectionContext("SRV01", TransportKind.CIM_SESSION, ComputerNameParams("SRV01"))
        request = CimQuery(
            namespace="root\\ccm\\ClientSDK",
            class_name="CCM_Application",
            filter="Name like 'Office%'",
            properties=("Name", "Id"),
        )

        query_executor.query(context, request)

        call = cim_transport.query_calls[0]
        assert call["namespace"] == "root\\ccm\\ClientSDK"
        assert call["filter"] == "Name like 'Office%'"
        assert call["properties"] == ("Name", "Id")
        assert call["target"] == "SRV01"

    def test_raw_query(self, query_executor, cim_transport):
        request = CimQuery(raw_query="SELECT * FROM Win32_Service WHERE Name='CcmExec'")
        query_executor.query(ConnectionContext.local("localhost"), request)

        assert cim_transport.query_calls[0]["raw_query"] == request.raw_query
        assert cim_transport.query_calls[0]["class_name"] is None

    def test_ps_session_runs_query_as_logic(self, query_executor, shell_transport, cim_transport):
        session = make_ps_session("SRV01")
        context = ConnectionContext("SRV01", TransportKind.PS_SESSION, PSSessionParams(session))
        shell_transport.outputs = [{"Name": "CcmExec", "RunspaceId": "abc", "PSComputerName": "SRV01"}]

        records = query_executor.query(context, CimQuery(class_name="Win32_Service", properties=("Name",)))

        assert records == [{"Name": "CcmExec"}]
        assert cim_transport.calls == 0
        call = shell_transport.calls[0]
        assert call["session"] is session
        assert call["body"] == REMOTE_QUERY_BODY
        assert call["arguments"] == (
            "root\\cimv2", "Win32_Service", None, None, ["Name"], list(METADATA_PROPERTIES),
        )

    def test_empty_result_is_empty_list(self, query_executor, shell_transport):
        context = ConnectionContext("SRV01", TransportKind.PS_SESSION, PSSessionParams(make_ps_session("SRV01")))
        shell_transport.outputs = []

        assert query_executor.query(context, CimQuery(class_name="CCM_Nothing")) == []
