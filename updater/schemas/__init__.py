from .manifest import Banners, RemoteManifest, Sections
from .update import (
    LocalPluginInfo,
    PluginDetails,
    PluginInfoQuery,
    PluginInfoRequest,
    PluginInfoResponse,
    UpdateCandidate,
    UpdateTransient,
    UpgradeOptions,
)

__all__ = [
    "Banners",
    "LocalPluginInfo",
    "PluginDetails",
    "PluginInfoQuery",
    "PluginInfoRequest",
    "PluginInfoResponse",
    "RemoteManifest",
    "Sections",
    "UpdateCandidate",
    "UpdateTransient",
    "UpgradeOptions",
]
