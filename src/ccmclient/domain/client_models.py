# pylint: disable=missing-module-docstring,line-too-long
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ClientInfo(BaseModel):
    """Identity and version of the ConfigMgr client."""

    client_version: Optional[str] = Field(None, description="SMS_Client.ClientVersion")
    client_id: Optional[str] = Field(None, description="CCM_Client.ClientId (GUID:...)")
    site_code: Optional[str] = Field(None, description="Assigned site code from SMS_Authority")
    management_point: Optional[str] = Field(None, description="SMS_Authority.CurrentManagementPoint")


class InventoryCycleStatus(BaseModel):
    """Last run of one inventory cycle."""

    cycle: str = Field(..., description="Cycle name, or the raw action ID when unknown")
    action_id: str = Field(..., description="InventoryActionID")
    last_cycle_started: Optional[datetime] = Field(None, description="LastCycleStartedDate")
    last_report_date: Optional[datetime] = Field(None, description="LastReportDate")
    major_version: Optional[int] = Field(None, description="LastMajorReportVersion")
    minor_version: Optional[int] = Field(None, description="LastMinorReportVersion")


class ScheduleTrigger(BaseModel):
    """Result of SMS_Client.TriggerSchedule."""

    schedule: str = Field(..., description="Schedule name, or the raw ID")
    schedule_id: str = Field(..., description="Schedule GUID")
    return_value: Optional[int] = Field(None, description="Method ReturnValue")
    full_cycle: bool = Field(False, description="Whether the inventory status was reset first")


class CacheInfo(BaseModel):
    """Client cache configuration."""

    location: Optional[str] = Field(None, description="Cache folder")
    size_mb: Optional[int] = Field(None, description="Configured cache size in MB")
    in_use: Optional[bool] = Field(None, description="CacheConfig.InUse")
    free_mb: Optional[int] = Field(None, description="Free space, when reported")


class CacheElement(BaseModel):
    """One content item in the client cache."""

    cache_id: Optional[str] = Field(None, description="CacheId")
    content_id: Optional[str] = Field(None, description="ContentId")
    content_version: Optional[str] = Field(None, description="ContentVer")
    location: Optional[str] = Field(None, description="Folder holding the content")
    size_kb: Optional[int] = Field(None, description="ContentSize in KB")
    last_referenced: Optional[datetime] = Field(None, description="LastReferenced")
    persist: Optional[bool] = Field(None, description="PersistInCache")


class ApplicationDeployment(BaseModel):
    """Application deployed to the client (CCM_Application)."""

    name: Optional[str] = Field(None, description="Display name")
    app_id: Optional[str] = Field(None, description="ScopeId_.../Application_... identifier")
    revision: Optional[str] = Field(None, description="Application revision")
    publisher: Optional[str] = Field(None, description="Publisher")
    software_version: Optional[str] = Field(None, description="SoftwareVersion")
    install_state: Optional[str] = Field(None, description="Installed / NotInstalled / ...")
    is_machine_target: Optional[bool] = Field(None, description="Deployed to the device rather than a user")


class SoftwareUpdate(BaseModel):
    """Software update deployed to the client (CCM_SoftwareUpdate)."""

    article_id: Optional[str] = Field(None, description="KB article number")
    name: Optional[str] = Field(None, description="Update title")
    update_id: Optional[str] = Field(None, description="UpdateID")
    evaluation_state: Optional[int] = Field(None, description="EvaluationState code")
    evaluation_state_name: Optional[str] = Field(None, description="EvaluationState name")
    compliance_state: Optional[int] = Field(None, description="ComplianceState (0 missing, 1 installed)")
    percent_complete: Optional[int] = Field(None, description="PercentComplete")
    deadline: Optional[datetime] = Field(None, description="Deadline")


class MaintenanceWindow(BaseModel):
    """Service window the client currently knows about."""

    window_id: Optional[str] = Field(None, description="ID")
    type_code: Optional[int] = Field(None, description="Type")
    type_name: Optional[str] = Field(None, description="Type as text")
    start_time: Optional[datetime] = Field(None, description="StartTime")
    end_time: Optional[datetime] = Field(None, description="EndTime")
    duration_seconds: Optional[int] = Field(None, description="Duration")


class RegistryValue(BaseModel):
    """A registry value read or written through StdRegProv."""

    hive: str = Field(..., description="HKLM, HKCU, ...")
    key: str = Field(..., description="Subkey path")
    name: str = Field(..., description="Value name; empty for the default value")
    kind: str = Field(..., description="string / expand_string / dword / qword / multi_string")
    value: Any = Field(None, description="Value data; None when the value does not exist")
    exists: bool = Field(True, description="False when the key or value is missing")
