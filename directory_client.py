import logging
from typing import List, Optional

import http_client
from locator import FileRef

logger = logging.getLogger(__name__)


def _records(payload, key: str) -> list:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    return []


class DirectoryClient:
    """Folder, file and schema lookups against the backend API."""

    def __init__(self, backend_url: str, timeout_s: float = 30.0, attempts: int = 3):
        self.backend_url = backend_url.rstrip("/")
        self.timeout_s = timeout_s
        self.attempts = attempts

    def _post(self, path: str, body: dict):
        return http_client.post_json(
            f"{self.backend_url}{path}",
            body,
            timeout_s=self.timeout_s,
            attempts=self.attempts,
        )

    def fetch_root_id(self, user_id: str) -> Optional[str]:
        payload = self._post("/root", {"user_id": user_id})
        if not isinstance(payload, dict):
            return None
        rid = payload.get("root_id") or payload.get("user_root_id") or payload.get("id")
        return str(rid) if rid else None

    def list_folders(self, folder_id: str) -> List[FileRef]:
        payload = self._post("/folders", {"current_folder_id": folder_id})
        return [FileRef.from_dict(r) for r in _records(payload, "folders") if isinstance(r, dict)]

    def list_files(self, folder_id: str) -> List[FileRef]:
        payload = self._post("/files", {"current_folder_id": folder_id})
        return [FileRef.from_dict(r) for r in _records(payload, "files") if isinstance(r, dict)]

    def get_columns(self, parent_id: str, table_name: str) -> List[str]:
        payload = self._post(
            "/getColumns", {"parent_id": parent_id, "table_name": table_name}
        )
        cols = payload.get("columns") if isinstance(payload, dict) else None
        if not isinstance(cols, list):
            return []
        return [str(c) for c in cols]
