import logging

import http_client
from config_paths import ConfigError

logger = logging.getLogger(__name__)


class StorageClient:
    """Reads objects through the storage proxy and writes them back."""

    def __init__(
        self,
        proxy_url: str,
        update_url: str,
        timeout_s: float = 30.0,
        upload_url: str = "",
    ):
        self.proxy_url = proxy_url
        self.update_url = update_url
        self.upload_url = upload_url
        self.timeout_s = timeout_s

    @classmethod
    def from_config(cls, cfg) -> "StorageClient":
        return cls(
            cfg["FILES_PROXY_URL"],
            cfg["FILES_UPDATE_URL"],
            timeout_s=cfg.get("TIMEOUT_SECONDS", 30.0),
            upload_url=cfg.get("UPLOAD_URL", ""),
        )

    def read_text(self, locator: str) -> str:
        text = http_client.get_text(
            self.proxy_url, params={"url": locator}, timeout_s=self.timeout_s
        )
        logger.debug("Read %d chars for %s", len(text), locator)
        return text

    def write_text(self, owner: str, file_name: str, text: str) -> dict:
        # the endpoint updates the object in place or creates it
        payload = http_client.post_form(
            self.update_url,
            data={"user_root_id": owner, "file_name": file_name},
            files={"file": (file_name, text.encode("utf-8"), "text/csv")},
            timeout_s=self.timeout_s,
        )
        logger.info("Wrote %s/%s (%d bytes)", owner, file_name, len(text.encode("utf-8")))
        return payload

    def upload(self, file_name: str, data, content_type: str = "text/csv") -> dict:
        """Store a new object under ``uploads/`` and return its ``path`` and ``url``.

        The endpoint never overwrites; each upload gets a fresh timestamped path.
        """
        if not self.upload_url:
            raise ConfigError("Upload URL not configured (set XBASE_UPLOAD_URL)")
        if not file_name:
            raise ValueError("Upload needs a file name")
        if isinstance(data, str):
            data = data.encode("utf-8")
        payload = http_client.post_form(
            self.upload_url,
            data={},
            files={"file": (file_name, data, content_type)},
            timeout_s=self.timeout_s,
        )
        logger.info("Uploaded %s to %s", file_name, payload.get("path"))
        return payload
