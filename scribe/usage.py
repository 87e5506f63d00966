"""UsageTracker — seconds of audio consumed against the free quota, persisted write-through."""
import json
import logging
import math
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from scribe.constants import (
    DEFAULT_USAGE_STORE_PATH,
    MSG_USAGE_CHARGED,
    MSG_USAGE_DENIED,
    MSG_USAGE_LOADED,
    MSG_USAGE_RESET,
    QUOTA_SECONDS,
    USAGE_STORE_KEY,
)
from scribe.models import UsageState

logger = logging.getLogger(__name__)


class UsageStore(ABC):
    @abstractmethod
    def load(self) -> int:
        """Return the persisted seconds used, 0 when nothing was saved yet."""
        ...

    @abstractmethod
    def save(self, used_seconds: int) -> None: ...


class JsonUsageStore(UsageStore):

    def __init__(self, path: Path = Path(DEFAULT_USAGE_STORE_PATH)) -> None:
        self._path = path

    def load(self) -> int:
        match self._path.exists():
            case False:
                return 0
            case True:
                try:
                    with open(self._path) as f:
                        raw = json.load(f)
                    return int(raw.get(USAGE_STORE_KEY, 0))
                except Exception as e:
                    logger.warning(f"Usage load failed: {e}, starting fresh")
                    return 0

    def save(self, used_seconds: int) -> None:
        try:
            with open(self._path, "w") as f:
                json.dump({USAGE_STORE_KEY: used_seconds}, f, indent=2)
        except Exception as e:
            logger.warning(f"Usage save failed: {e}")


class MemoryUsageStore(UsageStore):

    def __init__(self, used_seconds: int = 0) -> None:
        self.used_seconds = used_seconds

    def load(self) -> int:
        return self.used_seconds

    def save(self, used_seconds: int) -> None:
        self.used_seconds = used_seconds


class UsageTracker:
    """Single instance per process, constructed at startup and passed to whoever needs it."""

    def __init__(self, store: UsageStore) -> None:
        self._store = store
        self._lock = threading.Lock()
        self._used = min(QUOTA_SECONDS, max(0, store.load()))
        logger.info(MSG_USAGE_LOADED, self._used, QUOTA_SECONDS)

    @property
    def used_seconds(self) -> int:
        return self._used

    @property
    def remaining_seconds(self) -> int:
        return max(0, QUOTA_SECONDS - self._used)

    @property
    def has_reached_limit(self) -> bool:
        return self.remaining_seconds <= 0

    def snapshot(self) -> UsageState:
        return UsageState(used_seconds=self._used)

    def add_usage(self, seconds: float) -> bool:
        """Charge ``seconds`` (rounded up), capped at what is left. False if nothing is left."""
        with self._lock:
            remaining = self.remaining_seconds
            match remaining:
                case r if r <= 0:
                    logger.warning(MSG_USAGE_DENIED)
                    return False
                case _:
                    pass
            charge = min(max(0, math.ceil(seconds)), remaining)
            self._used += charge
            self._store.save(self._used)
            logger.info(MSG_USAGE_CHARGED, charge, self.remaining_seconds)
            return True

    def reset(self) -> None:
        with self._lock:
            self._used = 0
            self._store.save(self._used)
            logger.info(MSG_USAGE_RESET)
