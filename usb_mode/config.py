from __future__ import annotations
import copy, json, logging, os
from typing import Any, Dict

logger = logging.getLogger(__name__)

# Default config; the mode files live on the data partition of the device
DEFAULT: Dict[str, Any] = {
    "usb_mode": {
        "permanent_path": "/mnt/data/mode.cfg",
        "temporary_path": "/mnt/data/mode_tmp.cfg",
    },
    "server": {"host": "0.0.0.0", "port": 8000},
    "logging": {"level": "INFO"},
}

CONF_ENV = "USBMODE_CONFIG"
CONF_PATHS = [
    "/etc/usb-mode/config.json",
    os.path.expanduser("~/.config/usb-mode/config.json"),
]

# env var -> (section, key, cast)
ENV_OVERRIDES = {
    "USBMODE_PERMANENT_PATH": ("usb_mode", "permanent_path", str),
    "USBMODE_TEMPORARY_PATH": ("usb_mode", "temporary_path", str),
    "HOST": ("server", "host", str),
    "PORT": ("server", "port", int),
    "LOG_LEVEL": ("logging", "level", str),
}

def _candidate_paths() -> list[str]:
    # USBMODE_CONFIG is read at call time, not import time
    paths = [os.environ.get(CONF_ENV) or ""] + CONF_PATHS
    return [p for p in paths if p]

def load_config() -> Dict[str, Any]:
    cfg = copy.deepcopy(DEFAULT)
    for p in _candidate_paths():
        try:
            with open(p, "r") as f:
                data = json.load(f)
        except FileNotFoundError:
            continue
        except (OSError, ValueError) as e:
            logger.warning("skipping config %s: %s", p, e)
            continue
        if not isinstance(data, dict):
            logger.warning("skipping config %s: not a JSON object", p)
            continue
        cfg = _merge(cfg, data)
        break
    return _apply_env(cfg)

def _apply_env(cfg: Dict[str, Any]) -> Dict[str, Any]:
    for var, (section, key, cast) in ENV_OVERRIDES.items():
        raw = os.environ.get(var)
        if not raw:
            continue
        try:
            cfg.setdefault(section, {})[key] = cast(raw)
        except ValueError:
            logger.warning("ignoring %s=%r", var, raw)
    return cfg

def _merge(base: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in patch.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            out[k] = _merge(base[k], v)
        else:
            out[k] = v
    return out
