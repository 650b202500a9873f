"""
Plugin Loader

Handles reading/writing plugin configuration from the JSON file named by
settings.plugins_config_file and initialising the updater plugin at startup.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from updater.config import settings

if TYPE_CHECKING:
    from updater.plugins.base import PluginBase
    from updater.plugins.registry import PluginRegistry
    from updater.services.update_checker import UpdateChecker

logger = logging.getLogger(__name__)


def _config_path(path: str | Path | None = None) -> Path:
    return Path(path) if path is not None else Path(settings.plugins_config_file)


# ── Config I/O ────────────────────────────────────────────────────────────────


def load_plugins_config(path: str | Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load plugin configuration from disk.

    Returns an empty config (every plugin enabled) if the file does not exist
    or cannot be parsed.
    """
    config_file = _config_path(path)
    if config_file.exists():
        try:
            return json.loads(config_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read plugins config: %s", exc)
    return {}


def save_plugins_config(config: dict[str, dict[str, Any]], path: str | Path | None = None) -> None:
    """Persist plugin configuration to disk."""
    config_file = _config_path(path)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(
        json.dumps(config, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


# ── Startup / shutdown ────────────────────────────────────────────────────────


async def initialize_plugins(
    registry: PluginRegistry,
    checker: UpdateChecker,
    config_path: str | Path | None = None,
) -> list[PluginBase]:
    """
    Build, load and register the updater plugin unless it is disabled.

    Returns the plugins that were loaded.
    """
    from updater.plugins.updater_plugin import UpdaterPlugin

    config = load_plugins_config(config_path)
    loaded: list[PluginBase] = []

    for plugin in [UpdaterPlugin(checker, registry)]:
        plugin_config = config.get(plugin.meta.name, {})
        if not plugin_config.get("enabled", True):
            logger.info("Plugin %s is disabled; skipping", plugin.meta.name)
            continue
        await plugin.on_load(plugin_config)
        registry.register(plugin)
        loaded.append(plugin)

    logger.info("Plugin initialisation complete — %d plugins loaded", len(loaded))
    return loaded


async def shutdown_plugins(registry: PluginRegistry) -> None:
    """Unload and unregister every registered plugin."""
    for plugin in registry.all_plugins():
        try:
            await plugin.on_unload()
        except Exception as exc:
            logger.warning("Plugin %s failed to unload: %s", plugin.meta.name, exc)
        registry.unregister(plugin.meta.name)
