"""
Tests for UpdateChecker: the update decision, manifest caching, plugin details
and post-update cache eviction.
"""

import httpx
import pytest
from pydantic import ValidationError

from updater.config import Settings
from updater.schemas.manifest import RemoteManifest
from updater.schemas.update import (
    LocalPluginInfo,
    PluginDetails,
    PluginInfoQuery,
    UpdateCandidate,
    UpdateTransient,
    UpgradeOptions,
)
from updater.services.update_checker import build_update_checker, evaluate_update
from utils.mocks import CACHE_KEY, MANIFEST_URL, SAMPLE_MANIFEST

DAY = 24 * 60 * 60
BASENAME = "codewing-updater/codewing-updater.php"


def _manifest(**overrides) -> RemoteManifest:
    data = {**SAMPLE_MANIFEST, **overrides}
    return RemoteManifest.model_validate(data)


def _local(version: str = "1.0") -> LocalPluginInfo:
    return LocalPluginInfo(slug="codewing-updater", current_version=version, basename=BASENAME)


def _transient() -> UpdateTransient:
    return UpdateTransient(checked={BASENAME: "1.0", "hello-dolly/hello.php": "1.7.2"})


# ══════════════════════════════════════════════════════════════════════════════
# 1. evaluate_update
# ══════════════════════════════════════════════════════════════════════════════


class TestEvaluateUpdate:
    def test_newer_compatible_release_produces_candidate(self):
        remote = _manifest(version="1.2", requires="5.0", requires_php="7.4")

        candidate = evaluate_update(_local("1.0"), remote, host_version="6.0", runtime_version="8.0")

        assert candidate == UpdateCandidate(
            slug="codewing-updater",
            plugin=BASENAME,
            new_version="1.2",
            tested="6.4",
            package="https://updates.example.com/codewing-updater-1.2.zip",
        )

    @pytest.mark.parametrize(("local", "remote"), [("1.2", "1.2"), ("1.3", "1.2"), ("2.0", "1.10")])
    def test_same_or_older_release_never_produces_candidate(self, local, remote):
        assert evaluate_update(_local(local), _manifest(version=remote), "6.0", "8.0") is None

    def test_host_too_old_blocks_newer_release(self):
        remote = _manifest(version="1.2", requires="6.5")
        assert evaluate_update(_local("1.0"), remote, host_version="6.0", runtime_version="8.0") is None

    def test_runtime_too_old_blocks_newer_release(self):
        remote = _manifest(version="1.2", requires_php="8.1")
        assert evaluate_update(_local("1.0"), remote, host_version="6.0", runtime_version="8.0") is None

    def test_requirements_equal_to_available_versions_pass(self):
        remote = _manifest(version="1.2", requires="6.0", requires_php="8.0")
        assert evaluate_update(_local("1.0"), remote, "6.0", "8.0") is not None

    def test_missing_requirements_do_not_block(self):
        remote = _manifest(version="1.2", requires=None, requires_php=None)
        assert evaluate_update(_local("1.0"), remote, "6.0", "8.0") is not None

    @pytest.mark.parametrize(
        ("remote_version", "host"),
        [("latest", "6.0"), ("1.2", "six")],
    )
    def test_unparseable_versions_mean_no_update(self, remote_version, host):
        remote = _manifest(version=remote_version)
        assert evaluate_update(_local("1.0"), remote, host, "8.0") is None

    def test_candidate_fields_are_sanitized(self):
        remote = _manifest(version="1.2", tested="<b>6.4</b>", download_url="javascript:alert(1)")

        candidate = evaluate_update(_local("1.0"), remote, "6.0", "8.0")

        assert candidate.tested == "6.4"
        assert candidate.package == ""


# ══════════════════════════════════════════════════════════════════════════════
# 2. get_remote_manifest / caching
# ══════════════════════════════════════════════════════════════════════════════


class TestRemoteManifestCache:
    @pytest.mark.asyncio
    async def test_first_call_fetches_and_caches(self, make_checker, manifest_server, memory_cache):
        checker = make_checker()

        manifest = await checker.get_remote_manifest()

        assert manifest.version == "1.2"
        assert manifest_server.call_count == 1
        assert await memory_cache.get(CACHE_KEY) == manifest.to_cache()

    @pytest.mark.asyncio
    async def test_cache_reused_just_before_expiry(self, make_checker, manifest_server, clock):
        checker = make_checker()
        first = await checker.get_remote_manifest()

        clock.advance(DAY - 60)  # T + 23h59m
        manifest_server.payload["version"] = "9.9"
        second = await checker.get_remote_manifest()

        assert manifest_server.call_count == 1
        assert second == first

    @pytest.mark.asyncio
    async def test_cache_refetched_just_after_expiry(self, make_checker, manifest_server, clock):
        checker = make_checker()
        await checker.get_remote_manifest()

        clock.advance(DAY + 60)  # T + 24h01m
        manifest_server.payload["version"] = "1.3"
        refreshed = await checker.get_remote_manifest()

        assert manifest_server.call_count == 2
        assert refreshed.version == "1.3"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "server_kwargs",
        [{"status_code": 404}, {"body": b""}, {"body": b"{broken"}],
    )
    async def test_failures_return_none_and_cache_nothing(self, make_checker, manifest_server, memory_cache, server_kwargs):
        for name, value in server_kwargs.items():
            setattr(manifest_server, name, value)
        checker = make_checker()

        assert await checker.get_remote_manifest() is None
        assert await memory_cache.get(CACHE_KEY) is None

    @pytest.mark.asyncio
    async def test_network_error_returns_none(self, make_checker, manifest_server):
        manifest_server.error = httpx.ConnectTimeout("timed out")
        checker = make_checker()

        assert await checker.get_remote_manifest() is None

    @pytest.mark.asyncio
    async def test_failure_is_not_retried_within_a_call(self, make_checker, manifest_server):
        manifest_server.status_code = 500
        checker = make_checker()

        await checker.get_remote_manifest()

        assert manifest_server.call_count == 1

    @pytest.mark.asyncio
    async def test_corrupt_cache_entry_is_replaced(self, make_checker, manifest_server, memory_cache):
        await memory_cache.set(CACHE_KEY, {"garbage": True}, ttl=DAY)
        checker = make_checker()

        manifest = await checker.get_remote_manifest()

        assert manifest.version == "1.2"
        assert manifest_server.call_count == 1


# ══════════════════════════════════════════════════════════════════════════════
# 3. check_for_updates
# ══════════════════════════════════════════════════════════════════════════════


class TestCheckForUpdates:
    @pytest.mark.asyncio
    async def test_candidate_injected_into_transient(self, make_checker):
        checker = make_checker(host_version="6.0", runtime_version="8.0")
        transient = _transient()

        result = await checker.check_for_updates(transient)

        assert result is transient
        assert result.response[BASENAME]["new_version"] == "1.2"
        assert result.response[BASENAME]["slug"] == "codewing-updater"

    @pytest.mark.asyncio
    async def test_empty_checked_skips_fetch(self, make_checker, manifest_server):
        checker = make_checker()
        transient = UpdateTransient()

        result = await checker.check_for_updates(transient)

        assert result is transient
        assert result.response == {}
        assert manifest_server.call_count == 0

    @pytest.mark.asyncio
    async def test_incompatible_host_leaves_transient_untouched(self, make_checker):
        checker = make_checker(host_version="4.9")

        result = await checker.check_for_updates(_transient())

        assert result.response == {}

    @pytest.mark.asyncio
    async def test_manifest_failure_leaves_transient_untouched(self, make_checker, manifest_server):
        manifest_server.status_code = 503
        checker = make_checker()

        result = await checker.check_for_updates(_transient())

        assert result.response == {}

    @pytest.mark.asyncio
    async def test_other_plugins_responses_preserved(self, make_checker):
        checker = make_checker()
        transient = _transient()
        other = {
            "slug": "hello-dolly",
            "plugin": "hello-dolly/hello.php",
            "new_version": "1.7.3",
            "id": "w.org/plugins/hello-dolly",
            "icons": {"1x": "https://ps.w.org/hello-dolly/icon-128x128.jpg"},
        }
        transient.response["hello-dolly/hello.php"] = other

        result = await checker.check_for_updates(transient)

        assert result.response["hello-dolly/hello.php"] == other
        assert BASENAME in result.response

    @pytest.mark.asyncio
    async def test_up_to_date_plugin_gets_no_candidate(self, make_checker):
        checker = make_checker(plugin=_local("1.2"))

        result = await checker.check_for_updates(_transient())

        assert result.response == {}


# ══════════════════════════════════════════════════════════════════════════════
# 4. describe_plugin
# ══════════════════════════════════════════════════════════════════════════════


class TestDescribePlugin:
    @pytest.mark.asyncio
    async def test_other_slug_passes_through_unmodified(self, make_checker, manifest_server):
        checker = make_checker()
        original = {"untouched": True}

        result = await checker.describe_plugin(original, "plugin_information", PluginInfoQuery(slug="other-plugin"))

        assert result is original
        assert manifest_server.call_count == 0

    @pytest.mark.asyncio
    async def test_other_action_passes_through(self, make_checker):
        checker = make_checker()

        result = await checker.describe_plugin(False, "query_plugins", PluginInfoQuery(slug="codewing-updater"))

        assert result is False

    @pytest.mark.asyncio
    async def test_matching_query_maps_every_field(self, make_checker):
        checker = make_checker()

        details = await checker.describe_plugin(False, "plugin_information", PluginInfoQuery(slug="codewing-updater"))

        assert isinstance(details, PluginDetails)
        assert details.name == "CodeWing Updater"
        assert details.version == "1.2"
        assert details.requires == "5.0"
        assert details.requires_php == "7.4"
        assert details.author_profile == "https://codewing.example.com"
        assert details.download_link == SAMPLE_MANIFEST["download_url"]
        assert details.trunk == SAMPLE_MANIFEST["download_url"]
        assert details.last_updated == "2024-10-01 10:00:00"
        assert details.sections.installation == "<p>Upload and activate.</p>"
        assert details.banners.low.endswith("772x250.png")

    @pytest.mark.asyncio
    async def test_banners_omitted_when_manifest_has_none(self, make_checker, manifest_server):
        del manifest_server.payload["banners"]
        checker = make_checker()

        details = await checker.describe_plugin(False, "plugin_information", PluginInfoQuery(slug="codewing-updater"))

        assert details.banners is None

    @pytest.mark.asyncio
    async def test_unavailable_manifest_passes_through(self, make_checker, manifest_server):
        manifest_server.status_code = 500
        checker = make_checker()

        result = await checker.describe_plugin(False, "plugin_information", PluginInfoQuery(slug="codewing-updater"))

        assert result is False


# ══════════════════════════════════════════════════════════════════════════════
# 5. on_update_complete
# ══════════════════════════════════════════════════════════════════════════════


class TestOnUpdateComplete:
    @pytest.mark.asyncio
    async def test_plugin_update_clears_cache(self, make_checker, memory_cache):
        checker = make_checker()
        await checker.get_remote_manifest()

        await checker.on_update_complete(None, UpgradeOptions(action="update", type="plugin"))

        assert await memory_cache.get(CACHE_KEY) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("action", "kind"), [("install", "plugin"), ("update", "theme"), ("update", "core")])
    async def test_other_events_leave_cache(self, make_checker, memory_cache, action, kind):
        checker = make_checker()
        await checker.get_remote_manifest()

        await checker.on_update_complete(None, UpgradeOptions(action=action, type=kind))

        assert await memory_cache.get(CACHE_KEY) is not None

    @pytest.mark.asyncio
    async def test_next_check_after_update_refetches(self, make_checker, manifest_server):
        checker = make_checker()
        await checker.get_remote_manifest()

        await checker.on_update_complete(None, UpgradeOptions(action="update", type="plugin", plugins=[BASENAME]))
        await checker.get_remote_manifest()

        assert manifest_server.call_count == 2


# ══════════════════════════════════════════════════════════════════════════════
# 6. Wiring
# ══════════════════════════════════════════════════════════════════════════════


class TestBuildUpdateChecker:
    def test_builds_from_settings(self, test_settings, memory_cache):
        checker = build_update_checker(test_settings, memory_cache)

        assert checker.plugin_slug == "codewing-updater"
        assert checker.get_version() == "1.0"
        assert checker.cache_key == CACHE_KEY
        assert checker.cache_ttl == DAY
        assert checker.manifest_client.url == test_settings.manifest_url
        assert checker.manifest_client.timeout == 10

    @pytest.mark.asyncio
    async def test_default_version_sources_offer_update(self, memory_cache, manifest_server):
        defaults = Settings(manifest_url=MANIFEST_URL)
        checker = build_update_checker(defaults, memory_cache, http_client=manifest_server.client())

        result = await checker.check_for_updates(UpdateTransient(checked={BASENAME: "1.0"}))

        assert result.response[BASENAME]["new_version"] == "1.2"

    @pytest.mark.parametrize("field", ["manifest_cache_ttl_seconds", "manifest_timeout_seconds"])
    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_durations_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})
