"""
Plugin System

Public API:
    PluginMeta      — plugin metadata dataclass
    PluginBase      — abstract base class for all plugins
    PluginRegistry  — registry + filter/action dispatcher
    UpdaterPlugin   — hooks an UpdateChecker into the registry
    plugin_registry — global registry instance
"""

from .base import PluginBase, PluginMeta
from .registry import PluginRegistry, plugin_registry
from .updater_plugin import UpdaterPlugin

__all__ = ["PluginBase", "PluginMeta", "PluginRegistry", "UpdaterPlugin", "plugin_registry"]
