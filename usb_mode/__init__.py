from .app import create_app
from .mode_store import ModeStore, UsbMode, InvalidMode, StoreWriteFailed, mode_name

__all__ = ["create_app", "ModeStore", "UsbMode", "InvalidMode", "StoreWriteFailed", "mode_name"]
