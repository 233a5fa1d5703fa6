"""Textual UI for laneboard."""

from laneboard.ui.app import LaneboardApp
from laneboard.ui.status import ErrorLabel, SyncLabel, WipBanner

__all__ = [
    "ErrorLabel",
    "LaneboardApp",
    "SyncLabel",
    "WipBanner",
]
