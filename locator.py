from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote, urlsplit


class LocatorError(ValueError):
    pass


@dataclass(frozen=True)
class FileRef:
    id: str
    name: str
    parent_id: str
    bucket_url: str
    created_at: str = ""

    @classmethod
    def from_dict(cls, data) -> "FileRef":
        def text(key):
            value = data.get(key) if isinstance(data, dict) else None
            return "" if value is None else str(value)

        return cls(
            id=text("id"),
            name=text("name"),
            parent_id=text("parent_id"),
            bucket_url=text("bucket_url"),
            created_at=text("created_at"),
        )

    @property
    def is_csv(self) -> bool:
        return self.name.lower().endswith(".csv")

    @property
    def is_schema(self) -> bool:
        return "schema" in self.bucket_url.lower()

    @property
    def table_name(self) -> str:
        parts = self.bucket_url.split("|>")
        return parts[1].strip() if len(parts) > 1 else ""


@dataclass(frozen=True)
class StorageLocation:
    bucket: str
    path: str
    owner: str
    file_name: str


def decompose_locator(locator: str, bucket: Optional[str] = None) -> StorageLocation:
    """Split a public object URL or bucket-relative path into its parts.

    ``https://<host>/storage/v1/object/public/<bucket>/<owner>/<file>`` gives
    ``bucket``, ``path`` (``<owner>/<file>``), ``owner`` and ``file_name``.
    A locator without a scheme is taken as the relative path itself. When
    ``bucket`` is given, a URL naming a different bucket is rejected.
    """
    locator = (locator or "").strip()
    if not locator:
        raise LocatorError("Missing file locator")

    parts = urlsplit(locator)
    if parts.scheme and parts.netloc:
        segments = parts.path.split("/")
        if "public" not in segments:
            raise LocatorError("Invalid public URL structure")
        idx = segments.index("public")
        found_bucket = unquote(segments[idx + 1]) if idx + 1 < len(segments) else ""
        rel = unquote("/".join(segments[idx + 2 :]))
        if not found_bucket or not rel:
            raise LocatorError("Invalid public URL structure")
        if bucket and found_bucket != bucket:
            raise LocatorError(
                f"Bucket mismatch: expected '{bucket}', got '{found_bucket}'"
            )
    else:
        found_bucket = bucket or ""
        rel = locator

    rel = rel.strip("/")
    owner, _, file_name = rel.partition("/")
    if not owner or not file_name:
        raise LocatorError(f"Cannot derive owner and file name from '{rel}'")
    return StorageLocation(bucket=found_bucket, path=rel, owner=owner, file_name=file_name)
