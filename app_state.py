import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, Tuple

from file_type_handler import TabularContent
from locator import FileRef

logger = logging.getLogger(__name__)


@dataclass
class FileViewState:
    """Everything one file view owns; discarded when the view is closed."""

    file_ref: Optional[FileRef] = None
    committed: TabularContent = field(default_factory=TabularContent.empty)
    buffer: TabularContent = field(default_factory=TabularContent.empty)

    # Cell editing state
    editing: bool = False
    active_cell: Optional[Tuple[int, str]] = None

    loading: bool = False
    load_error: Optional[str] = None
    saving: bool = False
    save_error: Optional[str] = None

    # bumped on every open/close; async results carry the value they started with
    load_seq: int = 0
    # held across every check-then-assign of the fields above
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def headers(self) -> list[str]:
        return self.committed.headers

    def buffer_rows(self) -> list[dict[str, str]]:
        return self.buffer.rows

    def is_current(self, ref: Optional[FileRef], token: Optional[int] = None) -> bool:
        if ref is None or self.file_ref != ref:
            return False
        return token is None or token == self.load_seq


def _reset_content(state: FileViewState) -> None:
    state.committed = TabularContent.empty()
    state.buffer = TabularContent.empty()
    state.editing = False
    state.active_cell = None
    state.loading = False
    state.load_error = None
    state.saving = False
    state.save_error = None


def open_file(state: FileViewState, ref: FileRef) -> int:
    with state.lock:
        _reset_content(state)
        state.file_ref = ref
        state.loading = True
        state.load_seq += 1
        return state.load_seq


def close_file(state: FileViewState) -> None:
    with state.lock:
        _reset_content(state)
        state.file_ref = None
        state.load_seq += 1


def apply_loaded(
    state: FileViewState, ref: FileRef, token: int, content: TabularContent
) -> bool:
    with state.lock:
        if not state.is_current(ref, token):
            logger.warning("Discarding stale load result for %s", ref.name)
            return False
        state.committed = content
        state.buffer = content.copy()
        state.loading = False
        state.load_error = None
        return True


def apply_load_failed(state: FileViewState, ref: FileRef, token: int, message: str) -> bool:
    with state.lock:
        if not state.is_current(ref, token):
            logger.warning("Discarding stale load failure for %s", ref.name)
            return False
        state.loading = False
        state.load_error = message or "Failed to load file content"
        return True
