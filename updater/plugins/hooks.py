"""
Plugin Hook Constants

Hook names exposed by the host that the updater attaches to.
"""

from __future__ import annotations

# ── Filters ───────────────────────────────────────────────────────────────────
# (transient) -> transient, applied whenever the host reads its update state
HOOK_UPDATE_PLUGINS_TRANSIENT = "site_transient_update_plugins"
# (result, action, query) -> result, answers the plugin-details modal
HOOK_PLUGINS_API = "plugins_api"

# ── Actions ───────────────────────────────────────────────────────────────────
# (upgrader, options), fired after any install/update completes
HOOK_UPGRADER_PROCESS_COMPLETE = "upgrader_process_complete"

DEFAULT_PRIORITY = 10

# ── Master list ───────────────────────────────────────────────────────────────
ALL_HOOKS: list[str] = [
    HOOK_UPDATE_PLUGINS_TRANSIENT,
    HOOK_PLUGINS_API,
    HOOK_UPGRADER_PROCESS_COMPLETE,
]
