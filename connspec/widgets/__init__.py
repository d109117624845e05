"""Widget library for the Textual console."""

from __future__ import annotations

from .profile_list import ProfileList
from .status_bar import StatusBar

__all__ = ["ProfileList", "StatusBar"]
