"""
Update Checker Service

Owns one plugin's update lifecycle against its remote manifest:
- fetch the manifest through a TTL cache
- decide whether a newer, compatible release exists
- answer the host's plugin-details query
- evict the cached manifest after a successful self-update

All collaborators (HTTP client, cache, version sources) are injected.
"""

import logging
from collections.abc import Callable
from typing import Any

from updater.constants import (
    ACTION_PLUGIN_INFORMATION,
    DAY_IN_SECONDS,
    UPGRADE_ACTION_UPDATE,
    UPGRADE_TYPE_PLUGIN,
)
from updater.exceptions import ManifestParseError, UpdaterError
from updater.schemas.manifest import RemoteManifest
from updater.schemas.update import (
    LocalPluginInfo,
    PluginDetails,
    PluginInfoQuery,
    UpdateCandidate,
    UpdateTransient,
    UpgradeOptions,
)
from updater.services.manifest_service import ManifestClient
from updater.utils.cache import CacheBackend
from updater.utils.metrics import record_manifest_fetch, record_update_offered
from updater.utils.sanitize import esc_url, sanitize_text_field
from updater.utils.versioning import is_newer, requirement_met

logger = logging.getLogger(__name__)


def evaluate_update(
    local: LocalPluginInfo,
    remote: RemoteManifest,
    host_version: str,
    runtime_version: str,
) -> UpdateCandidate | None:
    """
    Decide whether *remote* is an installable update for *local*.

    A candidate is returned only when the remote version is newer and both the
    host and runtime minimums are satisfied. Unparseable versions mean no update.
    """
    try:
        if not is_newer(remote.version, local.current_version):
            return None
        if not requirement_met(remote.requires, host_version):
            return None
        if not requirement_met(remote.requires_php, runtime_version):
            return None
    except UpdaterError as exc:
        logger.warning("Skipping update check for %s: %s", local.slug, exc.message)
        return None

    return UpdateCandidate(
        slug=local.slug,
        plugin=local.basename,
        new_version=sanitize_text_field(remote.version),
        tested=sanitize_text_field(remote.tested),
        package=esc_url(remote.download_url),
    )


def build_plugin_details(remote: RemoteManifest) -> PluginDetails:
    """Map a manifest onto the record shown in the host's plugin-details modal."""
    return PluginDetails(
        name=remote.name,
        slug=remote.slug,
        version=remote.version,
        tested=remote.tested,
        requires=remote.requires,
        author=remote.author,
        author_profile=remote.author_profile,
        download_link=remote.download_url,
        trunk=remote.download_url,
        requires_php=remote.requires_php,
        last_updated=remote.last_updated,
        sections=remote.sections,
        banners=remote.banners,
    )


class UpdateChecker:
    """Self-update logic for a single plugin."""

    def __init__(
        self,
        plugin: LocalPluginInfo,
        manifest_client: ManifestClient,
        cache: CacheBackend,
        cache_key: str,
        host_version: Callable[[], str],
        runtime_version: Callable[[], str],
        cache_ttl: int = DAY_IN_SECONDS,
    ):
        self.plugin = plugin
        self.manifest_client = manifest_client
        self.cache = cache
        self.cache_key = cache_key
        self.cache_ttl = cache_ttl
        self._host_version = host_version
        self._runtime_version = runtime_version

    @property
    def plugin_slug(self) -> str:
        return self.plugin.slug

    def get_version(self) -> str:
        return self.plugin.current_version

    # ── Manifest ──────────────────────────────────────────────────────────────

    async def _cached_manifest(self) -> RemoteManifest | None:
        data = await self.cache.get(self.cache_key)
        if data is None:
            return None
        try:
            return RemoteManifest.from_cached(data)
        except ManifestParseError:
            logger.warning("Discarding corrupt cached manifest under %s", self.cache_key)
            await self.cache.delete(self.cache_key)
            return None

    async def get_remote_manifest(self) -> RemoteManifest | None:
        """
        Return the remote manifest, from cache when fresh.

        On a miss the manifest is fetched and cached for cache_ttl seconds.
        Fetch failures are logged and yield None; nothing is cached for them.
        """
        manifest = await self._cached_manifest()
        if manifest is not None:
            return manifest

        try:
            manifest = await self.manifest_client.fetch()
        except UpdaterError as exc:
            record_manifest_fetch(type(exc).__name__)
            logger.warning(
                "Manifest unavailable for %s: %s",
                self.plugin.slug,
                exc.message,
                extra={"details": exc.details},
            )
            return None

        record_manifest_fetch("ok")
        await self.cache.set(self.cache_key, manifest.to_cache(), self.cache_ttl)
        return manifest

    # ── Host hooks ────────────────────────────────────────────────────────────

    async def check_for_updates(self, transient: UpdateTransient) -> UpdateTransient:
        """Filter for the update-plugins transient; injects a candidate if one exists."""
        # The host fills `checked` before asking plugins; until then there is nothing to compare.
        if not transient.checked:
            return transient

        remote = await self.get_remote_manifest()
        if remote is None:
            return transient

        candidate = evaluate_update(
            self.plugin,
            remote,
            host_version=self._host_version(),
            runtime_version=self._runtime_version(),
        )
        if candidate is not None:
            transient.response[candidate.plugin] = candidate.model_dump()
            record_update_offered()
            logger.info(
                "Update available for %s: %s -> %s",
                self.plugin.slug,
                self.plugin.current_version,
                candidate.new_version,
            )
        return transient

    async def describe_plugin(self, result: Any, action: str, query: PluginInfoQuery) -> Any:
        """Filter for plugin-details queries; passes *result* through unless it is about us."""
        if action != ACTION_PLUGIN_INFORMATION:
            return result

        if query.slug != self.plugin.slug:
            return result

        remote = await self.get_remote_manifest()
        if remote is None:
            return result

        return build_plugin_details(remote)

    async def on_update_complete(self, upgrader: Any, options: UpgradeOptions) -> None:
        """Evict the cached manifest once a plugin update has finished."""
        if options.action == UPGRADE_ACTION_UPDATE and options.type == UPGRADE_TYPE_PLUGIN:
            await self.cache.delete(self.cache_key)
            logger.info("Purged cached manifest %s after plugin update", self.cache_key)


def build_update_checker(settings, cache: CacheBackend, http_client=None) -> UpdateChecker:
    """Wire an UpdateChecker from application settings."""
    plugin = LocalPluginInfo(
        slug=settings.plugin_slug,
        current_version=settings.plugin_version,
        basename=settings.plugin_basename,
    )
    client = ManifestClient(
        settings.manifest_url,
        timeout=settings.manifest_timeout_seconds,
        client=http_client,
    )
    return UpdateChecker(
        plugin=plugin,
        manifest_client=client,
        cache=cache,
        cache_key=settings.cache_key,
        host_version=lambda: settings.host_version,
        runtime_version=lambda: settings.runtime_version,
        cache_ttl=settings.manifest_cache_ttl_seconds,
    )
