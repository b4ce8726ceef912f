"""
app.py

HTTP surface used by the admin panel:

    GET  /api/auth/youtube              -> {"url": <consent url>}
    GET  /api/auth/youtube/callback     -> redirect back to the admin panel
    GET  /api/auth/youtube/status       -> connection status
    POST /api/auth/youtube/disconnect   -> {"success": true}
    POST /api/admin/youtube/sync        -> SyncResult + timestamp
    GET  /api/admin/youtube/sync/last   -> last sync log entry

Run with: uvicorn --factory culturia_sync.api.app:create_app
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse, RedirectResponse

from culturia_sync import __version__
from culturia_sync.auth.errors import AuthError
from culturia_sync.bootstrap import bootstrap_base_env, bootstrap_run_context
from culturia_sync.env import ConfigError
from culturia_sync.logger import get_logger, init_logging
from culturia_sync.services import Services, build_services
from culturia_sync.sync.models import utc_now_iso
from culturia_sync.sync.request import SyncRequest, SyncValidationError

logger = get_logger(__name__)


def _admin_redirect(admin_url: str, **params: str) -> RedirectResponse:
    sep = "&" if "?" in admin_url else "?"
    return RedirectResponse(url=f"{admin_url}{sep}{urlencode(params)}", status_code=307)


def create_app(services: Optional[Services] = None) -> FastAPI:
    if services is None:
        bootstrap_base_env()
        bootstrap_run_context(command="serve")
        init_logging()
        services = build_services()

    app = FastAPI(
        title="Culturia YouTube Sync",
        version=__version__,
        description="Syncs approved Culturia submissions into YouTube playlists",
    )
    app.state.services = services

    # ------------------------------------------------------------
    # OAuth connection
    # ------------------------------------------------------------

    @app.get("/api/auth/youtube")
    def auth_url():
        try:
            url = services.oauth.authorization_url()
        except ConfigError as e:
            logger.error(f"Error generating YouTube auth URL: {e}")
            return JSONResponse(
                status_code=500, content={"error": "Failed to generate auth URL"}
            )
        return {"url": url}

    @app.get("/api/auth/youtube/callback")
    def auth_callback(code: Optional[str] = None, error: Optional[str] = None):
        admin_url = services.env.admin_url

        if error:
            logger.warning(f"YouTube OAuth error: {error}")
            return _admin_redirect(admin_url, error="auth_failed")

        if not code:
            return _admin_redirect(admin_url, error="no_code")

        try:
            credential = services.oauth.exchange_code(code)
            services.tokens.connect(credential)
        except (AuthError, ConfigError, OSError) as e:
            logger.error(f"YouTube OAuth callback error: {e}")
            return _admin_redirect(admin_url, error="callback_failed")

        return _admin_redirect(admin_url, success="connected")

    @app.get("/api/auth/youtube/status")
    def auth_status():
        return services.tokens.status().to_dict()

    @app.post("/api/auth/youtube/disconnect")
    def auth_disconnect():
        services.tokens.disconnect()
        return {"success": True}

    # ------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------

    @app.post("/api/admin/youtube/sync")
    def trigger_sync(payload: Dict[str, Any] = Body(default={})):
        try:
            request = SyncRequest.from_payload(payload)
        except SyncValidationError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})

        try:
            result = services.orchestrator.run(request)
        except Exception as e:
            logger.exception(f"Sync error: {e}")
            return JSONResponse(
                status_code=500,
                content={"error": "Sync failed", "message": str(e), "success": False},
            )

        try:
            services.sync_log.append(request, result)
        except OSError as e:
            logger.warning(f"Could not write sync log entry: {e}")

        return {**result.to_dict(), "timestamp": utc_now_iso()}

    @app.get("/api/admin/youtube/sync/last")
    def last_sync():
        return {"lastSync": services.sync_log.last()}

    return app
