"""Host control capability and its Windows backend."""

from .protocol import HostControl
from .windows import WindowsHostControl

__all__ = ["HostControl", "WindowsHostControl"]
