from __future__ import annotations
import enum
import logging
import os
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

class ModeStoreError(Exception):
    pass

class InvalidMode(ModeStoreError):
    pass

class StoreWriteFailed(ModeStoreError):
    pass


class UsbMode(enum.IntEnum):
    CDC_NCM = 1
    CDC_ECM = 2
    RNDIS = 3

    @property
    def wire_name(self) -> str:
        return self.name.lower()

def mode_name(value: Optional[int]) -> str:
    """Wire name for a stored integer, or "unknown" for anything outside the enum."""
    try:
        return UsbMode(value).wire_name
    except ValueError:
        return UNKNOWN

def mode_from_name(name: str) -> UsbMode:
    # exact, case-sensitive
    for m in UsbMode:
        if m.wire_name == name:
            return m
    raise InvalidMode(f"unknown mode name: {name!r}")

def supported_names() -> list[str]:
    return [m.wire_name for m in UsbMode]


class SettingState(enum.Enum):
    MISSING = "missing"
    INVALID = "invalid"
    VALUE = "value"

@dataclass(frozen=True)
class StoredSetting:
    state: SettingState
    value: Optional[int] = None

    @property
    def positive(self) -> bool:
        return self.state is SettingState.VALUE and self.value is not None and self.value > 0

# leading integer, like scanf("%d"); trailing content is ignored
_INT_RE = re.compile(r"\s*([+-]?\d+)", re.ASCII)

def parse_setting(text: str) -> StoredSetting:
    m = _INT_RE.match(text)
    if not m:
        return StoredSetting(SettingState.INVALID)
    return StoredSetting(SettingState.VALUE, int(m.group(1)))


class ModeStore:
    """
    Two setting files: a temporary override and a permanent default.
    The temporary one wins whenever it holds a positive value.
    Files are re-read on every call; there is no cache and no locking,
    concurrent writers end up last-writer-wins.
    """

    def __init__(self, permanent_path: str, temporary_path: str):
        self.permanent_path = permanent_path
        self.temporary_path = temporary_path

    # ---------- reads ----------
    def read_setting(self, path: str) -> StoredSetting:
        try:
            with open(path, "r") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError):
            return StoredSetting(SettingState.MISSING)
        return parse_setting(text)

    def get_effective_mode(self) -> Optional[int]:
        """
        Effective mode value, or None when nothing usable is stored.

        A positive temporary value is returned as-is, even outside UsbMode;
        membership is checked by callers. Non-positive or unparsable
        temporary content falls through to the permanent setting.
        """
        tmp = self.read_setting(self.temporary_path)
        if tmp.positive:
            return tmp.value
        perm = self.read_setting(self.permanent_path)
        if perm.positive:
            return perm.value
        return None

    def has_temporary(self) -> bool:
        return os.path.exists(self.temporary_path)

    # ---------- writes ----------
    def set_mode(self, mode: int, permanent: bool = False) -> None:
        try:
            mode = UsbMode(mode)
        except ValueError:
            logger.warning("invalid mode value: %r", mode)
            raise InvalidMode(f"invalid mode value: {mode!r}") from None

        if permanent:
            self._write(self.permanent_path, mode)
            self._remove_temporary()
            logger.info("permanent mode set: %s (%d)", mode.wire_name, mode)
        else:
            self._write(self.temporary_path, mode)
            logger.info("temporary mode set: %s (%d)", mode.wire_name, mode)

    def _write(self, path: str, mode: UsbMode) -> None:
        # truncation happens only once open() has succeeded
        try:
            with open(path, "w") as f:
                f.write(str(int(mode)))
        except OSError as e:
            logger.warning("cannot write %s: %s", path, e)
            raise StoreWriteFailed(f"cannot write {path}") from e

    def _remove_temporary(self) -> None:
        try:
            os.unlink(self.temporary_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            # best-effort; the permanent value is already on disk
            logger.warning("cannot remove %s: %s", self.temporary_path, e)
