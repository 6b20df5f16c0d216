"""Transport-neutral representation of an uploaded profile photo."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedFile:
    """Binary payload plus the metadata the object store needs."""

    content: bytes
    content_type: str | None = None
    filename: str | None = None

    @property
    def extension(self) -> str:
        """File extension including the dot, or an empty string."""
        if self.filename and "." in self.filename:
            return self.filename[self.filename.rindex("."):]
        return ""
