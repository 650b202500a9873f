"""
Plugin Base Classes

PluginMeta: declarative metadata for a plugin (the plugin header).
PluginBase: abstract base class all plugins must subclass.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class PluginMeta:
    """
    Declarative metadata describing a plugin.

    Attributes:
        name:          Machine-readable slug, e.g. "codewing-updater".
        version:       Version string, e.g. "1.0".
        description:   Human-readable description.
        author:        Plugin author.
        author_uri:    Author homepage.
        license:       License name.
        hooks:         Hook names this plugin attaches callbacks to.
        config_schema: JSON Schema fragments describing configurable options.
    """

    name: str
    version: str
    description: str
    author: str = "CodeWing"
    author_uri: str = ""
    license: str = "GPL"
    hooks: list[str] = field(default_factory=list)
    config_schema: dict[str, Any] = field(default_factory=dict)


class PluginBase(ABC):
    """
    Abstract base class for all plugins.

    Subclasses must implement the `meta` property.
    Lifecycle methods default to no-ops.
    """

    @property
    @abstractmethod
    def meta(self) -> PluginMeta:
        """Return the plugin's metadata."""
        ...

    async def on_load(self, config: dict[str, Any]) -> None:  # noqa: B027
        """
        Called once at startup with the plugin's persisted config dict.

        Override to attach filters and actions to the registry.
        """

    async def on_unload(self) -> None:  # noqa: B027
        """
        Called when the plugin is disabled or the app shuts down.

        Override to detach callbacks and release resources.
        """

    async def handle_hook(self, hook_name: str, payload: dict[str, Any]) -> Any:
        """Receive a broadcast hook event. Default implementation is a no-op."""
        return None
