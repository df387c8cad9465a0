"""
Stream categories of a test run.
"""

from enum import Enum


class StreamCategory(Enum):
    """Direction and phase of a stream group.

    The value is the ``(download, both)`` flag pair recorded with the group.
    """

    UPLOAD_ONLY = (False, False)
    DOWNLOAD_ONLY = (True, False)
    BOTH_UPLOAD = (False, True)
    BOTH_DOWNLOAD = (True, True)

    @classmethod
    def from_flags(cls, download: bool, both: bool) -> "StreamCategory":
        return cls((bool(download), bool(both)))

    @property
    def download(self) -> bool:
        return self.value[0]

    @property
    def both(self) -> bool:
        return self.value[1]

    @property
    def label(self) -> str:
        direction = "download" if self.download else "upload"
        return f"both_{direction}" if self.both else direction
