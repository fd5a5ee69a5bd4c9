import logging
from typing import List, Optional, Tuple

from http_client import HttpError, TransportError
from locator import FileRef

logger = logging.getLogger(__name__)

HOME_LABEL = "Home"


class FolderBrowser:
    """Breadcrumb navigation over the backend's folder tree."""

    def __init__(self, directory, user_id: str):
        self.directory = directory
        self.user_id = user_id
        self.root_id: Optional[str] = None
        self.crumbs: List[Tuple[str, str]] = [("", HOME_LABEL)]
        self.folders: List[FileRef] = []
        self.files: List[FileRef] = []
        self.loading = False

    @property
    def current_folder_id(self) -> str:
        return self.crumbs[-1][0]

    def ensure_root(self) -> Optional[str]:
        if self.root_id:
            return self.root_id
        if not self.user_id:
            return None
        try:
            self.root_id = self.directory.fetch_root_id(self.user_id)
        except (HttpError, TransportError) as e:
            logger.warning("Root lookup failed for %s: %s", self.user_id, e)
            return None
        return self.root_id

    def open_root(self) -> bool:
        rid = self.ensure_root()
        if not rid:
            self.folders, self.files = [], []
            return False
        self.crumbs = [(rid, HOME_LABEL)]
        return self.refresh()

    def enter(self, folder: FileRef) -> bool:
        self.crumbs.append((folder.id, folder.name))
        return self.refresh()

    def go_to(self, index: int) -> bool:
        if index < 0 or index >= len(self.crumbs):
            raise IndexError(f"No breadcrumb at {index}")
        self.crumbs = self.crumbs[: index + 1]
        return self.refresh()

    def up(self) -> bool:
        if len(self.crumbs) <= 1:
            return False
        return self.go_to(len(self.crumbs) - 2)

    def refresh(self) -> bool:
        folder_id = self.current_folder_id
        if not folder_id:
            return False
        self.loading = True
        try:
            folders = self.directory.list_folders(folder_id)
            files = self.directory.list_files(folder_id)
        except (HttpError, TransportError) as e:
            logger.warning("Listing %s failed: %s", folder_id, e)
            if folder_id == self.current_folder_id:
                self.folders, self.files = [], []
                self.loading = False
            return False
        if folder_id != self.current_folder_id:
            logger.warning("Discarding stale listing for %s", folder_id)
            return False
        self.folders, self.files = folders, files
        self.loading = False
        return True

    def path_label(self) -> str:
        return " / ".join(name for _, name in self.crumbs)
