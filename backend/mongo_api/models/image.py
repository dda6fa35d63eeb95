"""
Mongo API — Image Record
=========================

What:  An uploaded image: name, raw bytes, MIME type and creation time.

Stored as a GridFS file: the file's "filename" is the image name, the bytes
are chunked by GridFS, and "metadata" holds {"mime_type", "created"}.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from mongo_api.models.identifier import RecordId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Image:
    name: str
    data: bytes
    mime_type: str = ""
    created: datetime = field(default_factory=_utcnow)
    id: Optional[RecordId] = None

    def metadata(self) -> Dict[str, Any]:
        return {"mime_type": self.mime_type, "created": self.created}

    @property
    def size(self) -> int:
        return len(self.data)
