"""
Tests for the client feature operations over fake transports.
"""

from datetime import datetime, timedelta, timezone

import pytest

from ccmclient.application.features import base, cache, client, inventory, maintenance, registry, schedules, software
from ccmclient.domain.context import ComputerNameParams, ConnectionContext, PSSessionParams
from ccmclient.domain.errors import CCMClientError, MethodCallFailed, UnsupportedTransport
from ccmclient.domain.targets import TransportKind
from ccmclient.domain.requests import PSTyped

from conftest import make_ps_session

LOCAL = ConnectionContext.local("WORKSTATION01")
BARE = ConnectionContext("SRV01", TransportKind.CIM_SESSION, ComputerNameParams("SRV01"))


def ps_context(name="SRV01"):
    return ConnectionContext(name, TransportKind.PS_SESSION, PSSessionParams(make_ps_session(name)))


class TestParsing:
    """Value conversion helpers."""

    def test_ms_date(self):
        assert base.parse_cim_datetime("/Date(1700000000000)/") == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert base.parse_cim_datetime("\\/Date(0)\\/") == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_dmtf(self):
        parsed = base.parse_cim_datetime("20240102030405.000000+060")
        assert parsed == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(minutes=60)))

    def test_iso(self):
        assert base.parse_cim_datetime("2024-01-02T03:04:05.1234567Z") == datetime(
            2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc
        )

    def test_wrapped_and_empty(self):
        assert base.parse_cim_datetime({"value": "/Date(0)/", "DateTime": "Thursday"}).year == 1970
        assert base.parse_cim_datetime(None) is None
        assert base.parse_cim_datetime("") is None
        assert base.parse_cim_datetime("yesterday") is None

    def test_conversions(self):
        assert base.to_int("5") == 5
        assert base.to_int("x") is None
        assert base.to_bool("True") is True
        assert base.to_bool(0) is False
        assert base.to_bool(None) is None


class TestClient:
    def test_client_info(self, executors, cim_transport):
        cim_transport.queries = {
            "SMS_Client": [{"ClientVersion": "5.00.9106.1000"}],
            "SMS_Authority": [{"Name": "SMS:P01", "CurrentManagementPoint": "mp01.corp.example.com"}],
            "CCM_Client": [{"ClientId": "GUID:1234"}],
        }

        info = client.get_client_info(executors, BARE)

        assert info.client_version == "5.00.9106.1000"
        assert info.site_code == "P01"
        assert info.management_point == "mp01.corp.example.com"
        assert info.client_id == "GUID:1234"
        assert {call["namespace"] for call in cim_transport.query_calls} == {"root\\ccm"}

    def test_client_info_without_client(self, executors):
        info = client.get_client_info(executors, BARE)
        assert info.client_version is None
        assert info.site_code is None

    def test_provisioning_mode(self, executors, cim_transport):
        cim_transport.methods[("StdRegProv", "GetStringValue")] = {"ReturnValue": 0, "sValue": "true"}
        assert client.get_provisioning_mode(executors, BARE) is True

        cim_transport.methods[("StdRegProv", "GetStringValue")] = {"ReturnValue": 1}
        assert client.get_provisioning_mode(executors, BARE) is False

    def test_set_provisioning_mode(self, executors, cim_transport):
        assert client.set_provisioning_mode(executors, BARE, False) is False

        call = cim_transport.method_calls[0]
        assert (call["class_name"], call["method"]) == ("SMS_Client", "SetClientProvisioningMode")
        assert call["arguments"] == {"bEnable": False}


class TestSchedules:
    def test_resolve_by_name_and_guid(self):
        assert schedules.resolve_schedule("machinepolicyevaluation") == (
            "MachinePolicyEvaluation", "{00000000-0000-0000-0000-000000000022}"
        )
        assert schedules.resolve_schedule("{00000000-0000-0000-0000-000000000113}") == (
            "SoftwareUpdatesScan", "{00000000-0000-0000-0000-000000000113}"
        )
        custom = "{ABCDEF00-0000-0000-0000-000000000001}"
        assert schedules.resolve_schedule(custom.lower()) == (custom, custom)

    def test_unknown_schedule(self):
        with pytest.raises(ValueError):
            schedules.resolve_schedule("MakeCoffee")

    def test_trigger(self, executors, cim_transport):
        result = schedules.trigger_schedule(executors, BARE, "HardwareInventory")

        assert result.schedule_id == "{00000000-0000-0000-0000-000000000001}"
        assert cim_transport.method_calls[0]["arguments"] == {"sScheduleID": result.schedule_id}
        assert cim_transport.method_calls[0]["target"] == "SRV01"

    def test_trigger_failure(self, executors, cim_transport):
        cim_transport.methods[("SMS_Client", "TriggerSchedule")] = {"ReturnValue": 2147749889}

        with pytest.raises(MethodCallFailed) as exc_info:
            schedules.trigger_schedule(executors, BARE, "HardwareInventory")
        assert exc_info.value.return_value == 2147749889


class TestInventory:
    def test_status(self, executors, cim_transport):
        cim_transport.queries["InventoryActionStatus"] = [
            {
                "InventoryActionID": "{00000000-0000-0000-0000-000000000001}",
                "LastCycleStartedDate": "20240102030405.000000+000",
                "LastReportDate": "/Date(1704164645000)/",
                "LastMajorReportVersion": 12,
                "LastMinorReportVersion": "3",
            }
        ]

        [status] = inventory.get_inventory_status(executors, BARE)

        assert status.cycle == "HardwareInventory"
        assert status.major_version == 12
        assert status.minor_version == 3
        assert status.last_cycle_started.year == 2024
        assert status.last_report_date is not None

    def test_delta_trigger_is_a_method_call(self, executors, cim_transport, shell_transport):
        result = inventory.trigger_inventory(executors, BARE, "softwareinventory")

        assert result.schedule == "SoftwareInventory"
        assert not result.full_cycle
        assert shell_transport.calls == []

    def test_full_trigger_runs_logic(self, executors, shell_transport):
        shell_transport.outputs = [{"ReturnValue": 0}]

        result = inventory.trigger_inventory(executors, ps_context(), "HardwareInventory", full=True)

        assert result.full_cycle
        assert shell_transport.calls[0]["arguments"] == ("{00000000-0000-0000-0000-000000000001}",)

    def test_full_trigger_over_cim_is_unsupported(self, executors):
        with pytest.raises(UnsupportedTransport):
            inventory.trigger_inventory(executors, BARE, full=True)

    def test_not_an_inventory_cycle(self):
        with pytest.raises(ValueError):
            inventory.inventory_cycle_id("MachinePolicyEvaluation")


class TestCache:
    def test_info(self, executors, cim_transport):
        cim_transport.queries["CacheConfig"] = [{"Location": "C:\\Windows\\ccmcache", "Size": 5120, "InUse": "True"}]

        info = cache.get_cache_info(executors, BARE)

        assert info.location == "C:\\Windows\\ccmcache"
        assert info.size_mb == 5120
        assert info.in_use is True
        assert cim_transport.query_calls[0]["namespace"] == "root\\ccm\\SoftMgmtAgent"

    def test_info_without_config(self, executors):
        assert cache.get_cache_info(executors, BARE).location is None

    def test_content(self, executors, cim_transport):
        cim_transport.queries["CacheInfoEx"] = [
            {"CacheId": "a", "ContentId": "Content_1", "ContentVer": "1", "ContentSize": 2048, "PersistInCache": 0},
        ]

        [element] = cache.get_cache_content(executors, BARE)

        assert element.content_id == "Content_1"
        assert element.size_kb == 2048
        assert element.persist is False

    def test_set_size(self, executors, shell_transport):
        shell_transport.outputs = [{"Location": "C:\\ccmcache", "TotalSize": 10240, "FreeSize": 8000}]

        info = cache.set_cache_size(executors, LOCAL, 10240)

        assert info.size_mb == 10240
        assert info.free_mb == 8000
        assert shell_transport.calls[0]["arguments"] == (10240,)
        assert shell_transport.calls[0]["session"] is None

    def test_set_size_rejects_zero(self, executors):
        with pytest.raises(ValueError):
            cache.set_cache_size(executors, LOCAL, 0)

    def test_clear(self, executors, shell_transport):
        shell_transport.outputs = ["Content_1", "Content_2"]

        removed = cache.clear_cache(executors, ps_context(), ["Content_1", "Content_2"])

        assert removed == ["Content_1", "Content_2"]
        assert shell_transport.calls[0]["arguments"] == (["Content_1", "Content_2"],)

    def test_clear_all_passes_null(self, executors, shell_transport):
        cache.clear_cache(executors, LOCAL)
        assert shell_transport.calls[0]["arguments"] == (None,)

    def test_clear_over_cim_is_unsupported(self, executors):
        with pytest.raises(UnsupportedTransport):
            cache.clear_cache(executors, BARE)


class TestSoftware:
    APP = {
        "Name": "7-Zip",
        "Id": "ScopeId_1/Application_2",
        "Revision": "4",
        "Publisher": "Igor Pavlov",
        "SoftwareVersion": "23.01",
        "InstallState": "NotInstalled",
        "IsMachineTarget": True,
    }

    def test_applications(self, executors, cim_transport):
        cim_transport.queries["CCM_Application"] = [self.APP]

        [app] = software.get_applications(executors, BARE)

        assert app.name == "7-Zip"
        assert app.is_machine_target is True
        assert cim_transport.query_calls[0]["namespace"] == "root\\ccm\\ClientSDK"

    def test_install_application(self, executors, cim_transport):
        cim_transport.queries["CCM_Application"] = [self.APP]

        app = software.install_application(executors, BARE, "ScopeId_1/Application_2")

        assert app.revision == "4"
        assert cim_transport.query_calls[0]["filter"] == "Id = 'ScopeId_1/Application_2'"
        arguments = cim_transport.method_calls[0]["arguments"]
        assert arguments["Revision"] == "4"
        assert arguments["IsMachineTarget"] is True
        assert arguments["Priority"] == "High"
        assert arguments["EnforcePreference"] == PSTyped("uint32", 0)

    def test_install_unknown_application(self, executors, cim_transport):
        with pytest.raises(CCMClientError, match="not deployed"):
            software.install_application(executors, BARE, "ScopeId_1/Application_404")
        assert cim_transport.method_calls == []

    def test_updates(self, executors, cim_transport):
        cim_transport.queries["CCM_SoftwareUpdate"] = [
            {"ArticleID": "5034441", "Name": "2024-01 Cumulative Update", "EvaluationState": 13, "ComplianceState": 0},
        ]

        [update] = software.get_software_updates(executors, BARE)

        assert update.article_id == "5034441"
        assert update.evaluation_state_name == "Error"

    def test_install_updates(self, executors, shell_transport):
        shell_transport.outputs = [{"ReturnValue": 0, "Count": 2}]

        count = software.install_software_updates(executors, LOCAL, ["KB5034441", "5034439"])

        assert count == 2
        assert shell_transport.calls[0]["arguments"] == (["5034441", "5034439"],)

    def test_install_updates_failure(self, executors, shell_transport):
        shell_transport.outputs = [{"ReturnValue": 87, "Count": 1}]

        with pytest.raises(MethodCallFailed):
            software.install_software_updates(executors, LOCAL)


class TestMaintenance:
    def test_windows_sorted_and_named(self, executors, cim_transport):
        cim_transport.queries["CCM_ServiceWindow"] = [
            {"ID": "b", "Type": 4, "StartTime": "20240301220000.000000+000", "Duration": 7200},
            {"ID": "a", "Type": 1, "StartTime": "20240201220000.000000+000", "Duration": 3600},
            {"ID": "c", "Type": 99},
        ]

        windows = maintenance.get_maintenance_windows(executors, BARE)

        assert [w.window_id for w in windows] == ["a", "b", "c"]
        assert windows[0].type_name == "All Deployments"
        assert windows[1].type_name == "Software Updates"
        assert windows[2].type_name == "Unknown"


class TestRegistry:
    def test_normalize(self):
        assert registry.normalize_hive("HKEY_LOCAL_MACHINE") == "HKLM"
        assert registry.normalize_hive("hkcu:") == "HKCU"
        assert registry.normalize_kind("DWORD") == "dword"
        with pytest.raises(ValueError):
            registry.normalize_hive("HKXX")
        with pytest.raises(ValueError):
            registry.normalize_kind("binary")

    def test_get_value(self, executors, cim_transport):
        cim_transport.methods[("StdRegProv", "GetDWORDValue")] = {"ReturnValue": 0, "uValue": 1}

        value = registry.get_registry_value(executors, BARE, "hklm", "SOFTWARE\\Policies\\X\\", "Enabled", "dword")

        assert value.exists
        assert value.value == 1
        assert value.hive == "HKLM"
        arguments = cim_transport.method_calls[0]["arguments"]
        assert arguments["hDefKey"] == PSTyped("uint32", 0x80000002)
        assert arguments["sSubKeyName"] == "SOFTWARE\\Policies\\X"

    def test_missing_value(self, executors, cim_transport):
        cim_transport.methods[("StdRegProv", "GetStringValue")] = {"ReturnValue": 1}

        value = registry.get_registry_value(executors, BARE, "HKLM", "SOFTWARE\\Nope", "X")

        assert not value.exists
        assert value.value is None

    def test_access_denied(self, executors, cim_transport):
        cim_transport.methods[("StdRegProv", "GetStringValue")] = {"ReturnValue": 5}

        with pytest.raises(MethodCallFailed):
            registry.get_registry_value(executors, BARE, "HKLM", "SAM\\SAM", "X")

    def test_set_value_creates_key(self, executors, cim_transport):
        registry.set_registry_value(executors, BARE, "HKLM", "SOFTWARE\\X", "Level", "3", "dword")

        create, write = cim_transport.method_calls
        assert create["method"] == "CreateKey"
        assert write["method"] == "SetDWORDValue"
        assert write["arguments"]["uValue"] == PSTyped("uint32", 3)

    def test_set_multi_string(self, executors, cim_transport):
        registry.set_registry_value(executors, BARE, "HKLM", "SOFTWARE\\X", "List", ["a", "b"], "multi_string")
        assert cim_transport.method_calls[1]["arguments"]["sValue"] == PSTyped("string[]", ["a", "b"])

    def test_set_over_pssession_runs_method_logic(self, executors, shell_transport, cim_transport):
        shell_transport.outputs = [{"ReturnValue": 0}]

        registry.set_registry_value(executors, ps_context(), "HKLM", "SOFTWARE\\X", "Name", "value")

        assert cim_transport.calls == 0
        assert [call["arguments"][2] for call in shell_transport.calls] == ["CreateKey", "SetStringValue"]
