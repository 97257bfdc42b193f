from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from . import config as cfgmod
from .mode_store import (
    ModeStore, ModeStoreError, InvalidMode, UsbMode,
    mode_from_name, mode_name, supported_names,
)

logger = logging.getLogger(__name__)

UNSET_VALUE = -1

MSG_EMPTY = "mode parameter must not be empty"
MSG_INVALID = "invalid mode, supported: " + ", ".join(supported_names())
MSG_FAILED = "failed to set mode"
MSG_SAVED = "mode saved, reboot required to take effect"

def envelope(data: Any = None, code: int = 0, error: str = ""):
    # application errors travel in the body; HTTP status stays 200
    return jsonify({"Code": code, "Error": error, "Data": data}), 200

def failure(error: str):
    return envelope(None, code=1, error=error)

def store_from_config(cfg: Dict[str, Any]) -> ModeStore:
    paths = cfg["usb_mode"]
    return ModeStore(paths["permanent_path"], paths["temporary_path"])

def _json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True, force=True)
    return body if isinstance(body, dict) else {}

def create_app(cfg: Optional[Dict[str, Any]] = None, store: Optional[ModeStore] = None) -> Flask:
    app = Flask(__name__)
    if cfg is None:
        cfg = cfgmod.load_config()
    if store is None:
        store = store_from_config(cfg)

    @app.get("/healthz")
    def healthz():
        return ("ok", 200)

    @app.get("/api/usb/mode")
    def usb_mode_get():
        value = store.get_effective_mode()
        return envelope({
            "mode": mode_name(value),
            "mode_value": UNSET_VALUE if value is None else value,
            "is_temporary": store.has_temporary(),
        })

    @app.post("/api/usb/mode")
    def usb_mode_set():
        body = _json_body()
        name = body.get("mode")
        if not isinstance(name, str):
            name = ""
        permanent = body.get("permanent")
        if not isinstance(permanent, bool):
            permanent = False

        if not name:
            logger.info("rejected mode change: empty mode")
            return failure(MSG_EMPTY)

        try:
            mode: UsbMode = mode_from_name(name)
        except InvalidMode:
            logger.info("rejected mode change: %r", name)
            return failure(MSG_INVALID)

        try:
            store.set_mode(mode, permanent)
        except ModeStoreError as e:
            logger.info("mode change to %s failed: %s", name, e)
            return failure(MSG_FAILED)

        return envelope({"mode": name, "permanent": permanent, "message": MSG_SAVED})

    return app
