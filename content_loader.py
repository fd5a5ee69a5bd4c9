import logging
from typing import Callable, Optional

from file_type_handler import FileTypeHandler, ParseError, TabularContent
from http_client import HttpError, TransportError
from locator import FileRef, LocatorError

logger = logging.getLogger(__name__)


class LoadError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def load_content(
    file_ref: FileRef,
    storage,
    on_columns: Optional[Callable[[list], None]] = None,
) -> TabularContent:
    """Fetch a file through the storage proxy and parse it into a table.

    CSV files (by name) are parsed with their first line as headers; anything
    else becomes a single ``Content`` cell. ``on_columns`` receives the
    non-empty column names of a successfully parsed CSV, once.
    """
    locator = (file_ref.bucket_url or "").strip()
    if not locator:
        raise LocatorError(f"No storage locator for '{file_ref.name}'")

    logger.debug("Loading %s from %s", file_ref.name, locator)
    try:
        text = storage.read_text(locator)
    except HttpError as e:
        body = e.response_text if e.response_text is not None else e.message
        raise LoadError(f"Fetch failed ({e.status_code}) - {body}", e.status_code) from e
    except TransportError as e:
        raise LoadError(str(e)) from e

    handler = FileTypeHandler(file_ref.name)
    try:
        content = handler.parse(text)
    except ParseError as e:
        raise LoadError(f"Could not parse {file_ref.name}: {e}") from e
    logger.info(
        "Loaded %s: %d columns, %d rows", file_ref.name, len(content.headers), len(content)
    )
    if handler.is_csv and on_columns is not None:
        on_columns([c for c in content.headers if c])
    return content
