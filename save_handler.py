import logging
from dataclasses import dataclass
from typing import Optional

from app_state import FileViewState
from file_type_handler import serialize_csv
from http_client import HttpError, TransportError
from locator import LocatorError, decompose_locator

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    ok: bool
    message: str
    path: Optional[str] = None
    applied: bool = True


def save(state: FileViewState, storage, bucket: Optional[str] = None) -> SaveResult:
    ref = state.file_ref
    if ref is None:
        return SaveResult(False, "No file selected")

    # committed is a placeholder until a load succeeds
    if state.loading:
        return SaveResult(False, f"{ref.name} is still loading")
    if state.load_error is not None:
        return SaveResult(False, f"{ref.name} did not load: {state.load_error}")
    if not state.editing:
        return SaveResult(False, "Nothing to save")

    if not ref.is_csv:
        state.save_error = f"Only CSV files can be saved: {ref.name}"
        return SaveResult(False, state.save_error)

    try:
        location = decompose_locator(ref.bucket_url, bucket=bucket)
    except LocatorError as e:
        state.save_error = str(e)
        return SaveResult(False, str(e))

    text = serialize_csv(state.headers, state.buffer_rows())
    # snapshot so later buffer edits are not promoted by this save
    written = state.buffer.copy()
    token = state.load_seq
    state.saving = True
    try:
        payload = storage.write_text(location.owner, location.file_name, text)
    except HttpError as e:
        return _failed(state, ref, token, e.message or str(e))
    except TransportError as e:
        return _failed(state, ref, token, str(e))

    with state.lock:
        if not state.is_current(ref, token):
            logger.warning("Save for %s finished after the view moved on", ref.name)
            return SaveResult(True, "Saved", applied=False)
        state.saving = False
        state.committed = written
        state.buffer = written.copy()
        state.active_cell = None
        state.editing = False
        state.save_error = None

    path = payload.get("path") if isinstance(payload, dict) else None
    message = payload.get("message") if isinstance(payload, dict) else None
    logger.info("Saved %s to %s", ref.name, path or location.path)
    return SaveResult(True, message or "Saved", path=path or location.path)


def _failed(state: FileViewState, ref, token: int, message: str) -> SaveResult:
    with state.lock:
        if not state.is_current(ref, token):
            return SaveResult(False, message, applied=False)
        state.saving = False
        state.save_error = message
    logger.warning("Save failed for %s: %s", ref.name, message)
    return SaveResult(False, message)
