import logging
import threading
from typing import Callable, Optional

import cell_editor
import save_handler
from app_state import (
    FileViewState,
    apply_load_failed,
    apply_loaded,
    close_file,
    open_file,
)
from content_loader import LoadError, load_content
from locator import FileRef, LocatorError

logger = logging.getLogger(__name__)


class FileView:
    """Drives one file view: load, edit cells, cancel and save."""

    def __init__(
        self,
        storage,
        set_status_cb: Callable[[str, float], None],
        on_columns: Optional[Callable[[list], None]] = None,
        bucket: Optional[str] = None,
    ):
        self.storage = storage
        self._set_status = set_status_cb
        self.on_columns = on_columns
        self.bucket = bucket
        self.state = FileViewState()

    # ---------- loading ----------
    def select(self, ref: FileRef) -> bool:
        token = open_file(self.state, ref)
        return self._load(ref, token)

    def select_async(self, ref: FileRef) -> threading.Thread:
        token = open_file(self.state, ref)
        t = threading.Thread(target=self._load, args=(ref, token), daemon=True)
        t.start()
        return t

    def back(self) -> None:
        close_file(self.state)

    def _load(self, ref: FileRef, token: int) -> bool:
        columns = []
        try:
            content = load_content(ref, self.storage, on_columns=columns.append)
        except (LoadError, LocatorError) as e:
            if apply_load_failed(self.state, ref, token, str(e)):
                self._set_status(str(e), 4)
            return False

        if not apply_loaded(self.state, ref, token, content):
            return False
        if columns and self.on_columns is not None:
            self.on_columns(columns[0])
        return True

    # ---------- editing ----------
    def edit(self) -> None:
        state = self.state
        if state.file_ref is None or state.loading or state.load_error is not None:
            self._set_status("Nothing to edit", 2)
            return
        cell_editor.begin_editing(state)

    def activate(self, row: int, column: str) -> Optional[str]:
        try:
            return cell_editor.activate_cell(self.state, row, column)
        except (IndexError, KeyError) as e:
            self._set_status(f"Invalid cell: {e}", 3)
            return None

    def set_value(self, value) -> None:
        if self.state.active_cell is None:
            self._set_status("No active cell", 2)
            return
        cell_editor.update_cell(self.state, value)

    def submit(self) -> None:
        cell_editor.deactivate_cell(self.state)

    def blur(self) -> None:
        cell_editor.deactivate_cell(self.state)

    def cancel(self) -> None:
        cell_editor.cancel_edits(self.state)
        self._set_status("Edits canceled", 2)

    # ---------- saving ----------
    def save(self) -> save_handler.SaveResult:
        result = save_handler.save(self.state, self.storage, bucket=self.bucket)
        if not result.applied:
            return result
        if result.ok:
            name = self.state.file_ref.name if self.state.file_ref else ""
            self._set_status(f"Saved {name}", 3)
        else:
            self._set_status(f"Save failed: {result.message}", 4)
        return result
