"""
Schemas for the host-facing side of the updater: local plugin identity, the
update transient, plugins_api queries and upgrade-complete options.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from updater.schemas.manifest import Banners, Sections


class LocalPluginInfo(BaseModel):
    """Identity of the installed plugin. Fixed for a given build."""

    model_config = ConfigDict(frozen=True)

    slug: str = Field(..., description="Plugin slug in the host registry.")
    current_version: str = Field(..., description="Installed version.")
    basename: str = Field(..., description="Host plugin path, e.g. 'my-plugin/my-plugin.php'.")


class UpdateCandidate(BaseModel):
    slug: str
    plugin: str = Field(..., description="Host plugin path the update applies to.")
    new_version: str
    tested: str = ""
    package: str = Field("", description="Package archive URL.")


class UpdateTransient(BaseModel):
    """The host's cached update state, filtered on every read."""

    model_config = ConfigDict(extra="allow")

    last_checked: Optional[int] = None
    checked: dict[str, str] = Field(default_factory=dict)
    response: dict[str, Any] = Field(default_factory=dict)


class PluginInfoQuery(BaseModel):
    model_config = ConfigDict(extra="allow")

    slug: str = ""


class PluginDetails(BaseModel):
    name: str
    slug: str
    version: str
    tested: str = ""
    requires: Optional[str] = None
    author: str = ""
    author_profile: str = ""
    download_link: str = ""
    trunk: str = ""
    requires_php: Optional[str] = None
    last_updated: str = ""
    sections: Sections = Field(default_factory=Sections)
    banners: Optional[Banners] = None


class UpgradeOptions(BaseModel):
    model_config = ConfigDict(extra="allow")

    action: str = ""
    type: str = ""


class PluginInfoRequest(BaseModel):
    action: str
    slug: str
    result: Any = None


class PluginInfoResponse(BaseModel):
    handled: bool
    result: Any = None
