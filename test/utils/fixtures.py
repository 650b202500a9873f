"""
Reusable pytest fixtures for updater tests

Provides fixtures for:
- A fake clock and a MemoryCache driven by it
- A fake manifest server
- An UpdateChecker factory wired to both
"""

import json

import pytest

from updater.config import Settings
from updater.schemas.update import LocalPluginInfo
from updater.services.manifest_service import ManifestClient
from updater.services.update_checker import UpdateChecker
from updater.utils.cache import MemoryCache

from .mocks import CACHE_KEY, MANIFEST_URL, SAMPLE_MANIFEST, FakeClock, ManifestServer


@pytest.fixture
def sample_manifest() -> dict:
    return json.loads(json.dumps(SAMPLE_MANIFEST))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock) -> MemoryCache:
    return MemoryCache(clock=clock)


@pytest.fixture
def manifest_server() -> ManifestServer:
    return ManifestServer()


@pytest.fixture
def local_plugin() -> LocalPluginInfo:
    return LocalPluginInfo(
        slug="codewing-updater",
        current_version="1.0",
        basename="codewing-updater/codewing-updater.php",
    )


@pytest.fixture
def make_checker(local_plugin, memory_cache, manifest_server):
    """Factory building an UpdateChecker against the fake manifest server."""

    def _make(host_version: str = "6.0", runtime_version: str = "8.0", plugin: LocalPluginInfo | None = None):
        client = ManifestClient(MANIFEST_URL, timeout=10, client=manifest_server.client())
        return UpdateChecker(
            plugin=plugin or local_plugin,
            manifest_client=client,
            cache=memory_cache,
            cache_key=CACHE_KEY,
            host_version=lambda: host_version,
            runtime_version=lambda: runtime_version,
        )

    return _make


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        manifest_url=MANIFEST_URL,
        cache_key=CACHE_KEY,
        host_version="6.0",
        runtime_version="8.0",
        cache_backend="memory",
        plugins_config_file=str(tmp_path / "plugins_config.json"),
    )
