"""
Pytest configuration and fixtures for updater tests

No test touches the network: outbound manifest requests go through
httpx.MockTransport and the cache runs on a controllable clock.
"""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH120
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))  # noqa: PTH100, PTH120

from utils.fixtures import (  # noqa: E402, F401
    clock,
    local_plugin,
    make_checker,
    manifest_server,
    memory_cache,
    sample_manifest,
    test_settings,
)
