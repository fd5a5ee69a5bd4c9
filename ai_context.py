import logging
from typing import List, Optional

from file_type_handler import parse_csv
from http_client import HttpError, TransportError
from locator import FileRef

logger = logging.getLogger(__name__)


class AiContext:
    """Files picked as context for the AI, with one column line per file."""

    def __init__(self):
        self.names: List[str] = []
        self.lines: List[str] = []

    @property
    def db_info(self) -> str:
        return "\n".join(self.lines)

    def add(self, name: str, columns) -> None:
        self.lines.append(f"{name} columns: {', '.join(columns)}")
        if name not in self.names:
            self.names.append(name)

    def remove(self, name: str) -> None:
        self.names = [n for n in self.names if n != name]
        prefix = f"{name} columns: "
        self.lines = [l for l in self.lines if not l.startswith(prefix)]

    def columns_for(self, ref: FileRef, storage, directory=None) -> Optional[List[str]]:
        try:
            if ref.is_csv:
                text = storage.read_text(ref.bucket_url)
                return [c for c in parse_csv(text).headers if c]
            if ref.is_schema and directory is not None:
                return directory.get_columns(ref.parent_id, ref.table_name)
        except (HttpError, TransportError) as e:
            logger.warning("Could not read columns for %s: %s", ref.name, e)
        return None

    def add_file(self, ref: FileRef, storage, directory=None) -> bool:
        columns = self.columns_for(ref, storage, directory)
        if columns is None:
            return False
        self.add(ref.name, columns)
        return True
