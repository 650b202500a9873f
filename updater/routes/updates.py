"""
Update Hook Routes

JSON surface over the host hooks the updater attaches to. A host process that
does not run plugins in-process posts its hook arguments here and uses the
filtered result.

POST /api/v1/updates/transient           → site_transient_update_plugins filter
POST /api/v1/updates/plugin-information  → plugins_api filter
POST /api/v1/updates/upgrade-complete    → upgrader_process_complete action
GET  /api/v1/updates/manifest            → current manifest (cached or fetched)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from updater.exceptions import ManifestUnavailableError
from updater.plugins.hooks import (
    HOOK_PLUGINS_API,
    HOOK_UPDATE_PLUGINS_TRANSIENT,
    HOOK_UPGRADER_PROCESS_COMPLETE,
)
from updater.plugins.registry import PluginRegistry
from updater.schemas.manifest import RemoteManifest
from updater.schemas.update import (
    PluginInfoQuery,
    PluginInfoRequest,
    PluginInfoResponse,
    UpdateTransient,
    UpgradeOptions,
)
from updater.services.update_checker import UpdateChecker

router = APIRouter(tags=["Updates"])
logger = logging.getLogger(__name__)


# ── Dependencies ──────────────────────────────────────────────────────────────


def get_registry(request: Request) -> PluginRegistry:
    return request.app.state.registry


def get_checker(request: Request) -> UpdateChecker:
    return request.app.state.checker


# ── Routes ────────────────────────────────────────────────────────────────────


@router.post("/transient", response_model=UpdateTransient)
async def filter_update_transient(
    transient: UpdateTransient,
    registry: PluginRegistry = Depends(get_registry),
) -> UpdateTransient:
    """Run the update-plugins transient through every registered filter."""
    return await registry.apply_filters(HOOK_UPDATE_PLUGINS_TRANSIENT, transient)


@router.post("/plugin-information", response_model=PluginInfoResponse)
async def plugin_information(
    payload: PluginInfoRequest,
    registry: PluginRegistry = Depends(get_registry),
) -> PluginInfoResponse:
    """Answer a plugin-details query; `handled` is False when every filter passed through."""
    query = PluginInfoQuery(slug=payload.slug)
    result = await registry.apply_filters(HOOK_PLUGINS_API, payload.result, payload.action, query)
    handled = result is not payload.result
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json")
    return PluginInfoResponse(handled=handled, result=result)


@router.post("/upgrade-complete")
async def upgrade_complete(
    options: UpgradeOptions,
    registry: PluginRegistry = Depends(get_registry),
) -> dict[str, str]:
    """Fire the upgrade-complete action."""
    await registry.do_action(HOOK_UPGRADER_PROCESS_COMPLETE, None, options)
    logger.info("Upgrade complete: action=%s type=%s", options.action, options.type)
    return {"status": "ok"}


@router.get("/manifest", response_model=RemoteManifest)
async def current_manifest(checker: UpdateChecker = Depends(get_checker)) -> RemoteManifest:
    """Return the manifest the checker is currently working from."""
    manifest = await checker.get_remote_manifest()
    if manifest is None:
        raise ManifestUnavailableError()
    return manifest
