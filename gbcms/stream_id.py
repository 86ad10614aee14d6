"""Stream identifiers of the form ``device/channel[.suffix...]``."""

from __future__ import annotations


class StreamID(str):
    """A stream identifier; also the media server's source id."""

    __slots__ = ()

    def device_id(self) -> str:
        """Return the part before the first slash."""
        return self.split("/")[0]

    def channel_id(self) -> str:
        """Return the part after the first slash, up to the first dot.

        Raises IndexError if the identifier has no slash.
        """
        return self.split("/")[1].split(".")[0]