"""
Content-addressed model file.
"""

import hashlib

from pydantic import BaseModel, Field


def compute_md5(content: bytes) -> str:
    """
    Compute the content hash of a model file.

    Args:
        content: Raw file bytes

    Returns:
        Lowercase hexadecimal MD5 digest
    """
    return hashlib.md5(content).hexdigest()


class InterlisFile(BaseModel):
    """
    Cached content of a model file, keyed by its content hash.

    Shared by every Model whose hash matches; not owned by any single Model.
    """

    md5: str = Field(..., description="Lowercase hex MD5 of the file bytes")
    content: str = Field(..., description="Textual file content")

    @classmethod
    def from_bytes(cls, content: bytes, encoding: str = "utf-8") -> "InterlisFile":
        """Create a file entry from raw bytes, hashing the bytes as fetched."""
        return cls(md5=compute_md5(content), content=content.decode(encoding, errors="replace"))
