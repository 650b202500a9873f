"""
Plugin Registry

PluginRegistry: stores registered plugins and the filter/action callbacks they
attach to host hooks.

- Filters thread a value through callbacks in priority order; each callback
  returns the (possibly replaced) value for the next one.
- Actions call every callback for its side effects.

A failing callback is logged and skipped; it never aborts the host request.
"""

from __future__ import annotations

import inspect
import itertools
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from updater.plugins.hooks import DEFAULT_PRIORITY

if TYPE_CHECKING:
    from updater.plugins.base import PluginBase

logger = logging.getLogger(__name__)


@dataclass(order=True)
class _Callback:
    priority: int
    sequence: int
    func: Callable[..., Any] = field(compare=False)


async def _call(func: Callable[..., Any], *args: Any) -> Any:
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _callback_name(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", repr(func))


class PluginRegistry:
    """
    In-process registry for plugins and hook callbacks.
    """

    def __init__(self) -> None:
        self._plugins: dict[str, PluginBase] = {}
        self._hook_subscriptions: dict[str, list[PluginBase]] = defaultdict(list)
        self._filters: dict[str, list[_Callback]] = defaultdict(list)
        self._actions: dict[str, list[_Callback]] = defaultdict(list)
        self._sequence = itertools.count()

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, plugin: PluginBase) -> None:
        """Register a plugin and index its hook subscriptions."""
        self._plugins[plugin.meta.name] = plugin
        for hook in plugin.meta.hooks:
            self._hook_subscriptions[hook].append(plugin)
        logger.info("Plugin registered: %s v%s", plugin.meta.name, plugin.meta.version)

    def unregister(self, name: str) -> PluginBase | None:
        """Remove a plugin from the registry and its hook subscriptions."""
        plugin = self._plugins.pop(name, None)
        if plugin is not None:
            for subscribers in self._hook_subscriptions.values():
                if plugin in subscribers:
                    subscribers.remove(plugin)
            logger.info("Plugin unregistered: %s", name)
        return plugin

    # ── Lookup ────────────────────────────────────────────────────────────────

    def get(self, name: str) -> PluginBase | None:
        """Return the plugin with the given name, or None if not registered."""
        return self._plugins.get(name)

    def all_plugins(self) -> list[PluginBase]:
        """Return all registered plugins in registration order."""
        return list(self._plugins.values())

    def is_registered(self, name: str) -> bool:
        return name in self._plugins

    # ── Filters & actions ─────────────────────────────────────────────────────

    def add_filter(self, hook_name: str, func: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        self._filters[hook_name].append(_Callback(priority, next(self._sequence), func))
        self._filters[hook_name].sort()

    def add_action(self, hook_name: str, func: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        self._actions[hook_name].append(_Callback(priority, next(self._sequence), func))
        self._actions[hook_name].sort()

    def remove_filter(self, hook_name: str, func: Callable[..., Any]) -> bool:
        return self._remove(self._filters, hook_name, func)

    def remove_action(self, hook_name: str, func: Callable[..., Any]) -> bool:
        return self._remove(self._actions, hook_name, func)

    @staticmethod
    def _remove(table: dict[str, list[_Callback]], hook_name: str, func: Callable[..., Any]) -> bool:
        callbacks = table.get(hook_name, [])
        for cb in callbacks:
            if cb.func == func:
                callbacks.remove(cb)
                return True
        return False

    def has_filter(self, hook_name: str) -> bool:
        return bool(self._filters.get(hook_name))

    def has_action(self, hook_name: str) -> bool:
        return bool(self._actions.get(hook_name))

    async def apply_filters(self, hook_name: str, value: Any, *args: Any) -> Any:
        """
        Pass *value* through every filter on *hook_name*.

        Args:
            hook_name: Hook constant from updater.plugins.hooks.
            value:     The value being filtered.
            *args:     Extra context passed to each callback after the value.

        Returns:
            The value returned by the last callback, or *value* if none ran.
        """
        for cb in list(self._filters.get(hook_name, [])):
            try:
                value = await _call(cb.func, value, *args)
            except Exception as exc:
                logger.warning("Filter %s on %s raised: %s", _callback_name(cb.func), hook_name, exc)
        return value

    async def do_action(self, hook_name: str, *args: Any) -> None:
        """Call every action callback on *hook_name*."""
        for cb in list(self._actions.get(hook_name, [])):
            try:
                await _call(cb.func, *args)
            except Exception as exc:
                logger.warning("Action %s on %s raised: %s", _callback_name(cb.func), hook_name, exc)

    # ── Hook dispatch ─────────────────────────────────────────────────────────

    async def fire_hook(self, hook_name: str, payload: dict[str, Any]) -> list[Any]:
        """
        Broadcast a hook to all subscribing plugins' handle_hook().

        Exceptions are caught and logged.

        Returns:
            List of return values from each subscriber (None for no-ops).
        """
        results: list[Any] = []
        for plugin in self._hook_subscriptions.get(hook_name, []):
            try:
                result = await plugin.handle_hook(hook_name, payload)
                results.append(result)
            except Exception as exc:
                logger.warning(
                    "Plugin %s hook %s raised: %s",
                    plugin.meta.name,
                    hook_name,
                    exc,
                )
        return results


# ── Global singleton ──────────────────────────────────────────────────────────
plugin_registry = PluginRegistry()
