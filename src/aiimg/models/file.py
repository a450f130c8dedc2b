"""File information models."""

from datetime import datetime

from pydantic import BaseModel


def format_size(size_bytes: int | float) -> str:
    """Convert bytes to human-readable string."""
    if size_bytes < 0:
        return "N/A"
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB", "TB", "PB"]:
        if size < 1024:
            if unit == "B":
                return f"{int(size)} {unit}"
            return f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} EB"


class FileInfo(BaseModel):
    """Basic information about the scanned image file."""

    path: str
    filename: str
    extension: str
    size_bytes: int
    mime_type: str = "image/jpeg"
    modified: datetime | None = None
    accessed: datetime | None = None
    captured: datetime | None = None  # EXIF DateTimeOriginal

    # Declared dimensions of the decoded bitmap
    width: int = 0
    height: int = 0

    # Set by the metadata detector when a smartphone brand is found in the tags
    is_smartphone: bool = False

    @property
    def size_human(self) -> str:
        """Return human-readable file size."""
        return format_size(self.size_bytes)

    @property
    def megapixels(self) -> float:
        """Return declared resolution in megapixels."""
        return self.width * self.height / 1_000_000

    @property
    def encoding(self) -> str:
        """Return a short description of the container encoding."""
        if self.mime_type == "image/jpeg":
            return "DCT, Huffman (JPEG)"
        if self.mime_type == "image/png":
            return "Deflate (Lossless PNG)"
        return "Unknown"
