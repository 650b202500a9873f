"""
Updater Plugin

Adapter that attaches an UpdateChecker to the host's hooks:
  - site_transient_update_plugins → check_for_updates   (filter, priority 10)
  - plugins_api                   → describe_plugin     (filter, priority 20)
  - upgrader_process_complete     → on_update_complete  (action, priority 10)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from updater.plugins.base import PluginBase, PluginMeta
from updater.plugins.hooks import (
    HOOK_PLUGINS_API,
    HOOK_UPDATE_PLUGINS_TRANSIENT,
    HOOK_UPGRADER_PROCESS_COMPLETE,
)
from updater.schemas.update import UpgradeOptions

if TYPE_CHECKING:
    from updater.plugins.registry import PluginRegistry
    from updater.services.update_checker import UpdateChecker

logger = logging.getLogger(__name__)

PLUGINS_API_PRIORITY = 20


class UpdaterPlugin(PluginBase):
    """Registers one UpdateChecker's methods as host hook callbacks."""

    def __init__(self, checker: UpdateChecker, registry: PluginRegistry):
        self.checker = checker
        self.registry = registry
        self._config: dict[str, Any] = {}
        self._meta = PluginMeta(
            name=checker.plugin_slug,
            version=checker.get_version(),
            description="This plugin automates updates from a custom server.",
            hooks=[HOOK_UPGRADER_PROCESS_COMPLETE],
            config_schema={
                "enabled": {"type": "boolean", "default": True},
            },
        )

    @property
    def meta(self) -> PluginMeta:
        return self._meta

    async def on_load(self, config: dict[str, Any]) -> None:
        self._config = config
        self.registry.add_filter(HOOK_UPDATE_PLUGINS_TRANSIENT, self.checker.check_for_updates)
        self.registry.add_filter(HOOK_PLUGINS_API, self.checker.describe_plugin, priority=PLUGINS_API_PRIORITY)
        self.registry.add_action(HOOK_UPGRADER_PROCESS_COMPLETE, self.checker.on_update_complete)
        logger.debug("UpdaterPlugin loaded for %s", self.checker.plugin_slug)

    async def on_unload(self) -> None:
        self.registry.remove_filter(HOOK_UPDATE_PLUGINS_TRANSIENT, self.checker.check_for_updates)
        self.registry.remove_filter(HOOK_PLUGINS_API, self.checker.describe_plugin)
        self.registry.remove_action(HOOK_UPGRADER_PROCESS_COMPLETE, self.checker.on_update_complete)
        await self.checker.manifest_client.aclose()
        logger.debug("UpdaterPlugin unloaded for %s", self.checker.plugin_slug)

    async def handle_hook(self, hook_name: str, payload: dict[str, Any]) -> None:
        # Broadcast form of upgrader_process_complete, for hosts that only fire events
        if hook_name == HOOK_UPGRADER_PROCESS_COMPLETE:
            await self.checker.on_update_complete(None, UpgradeOptions.model_validate(payload))
        return None
