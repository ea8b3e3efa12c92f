"""Multichain bridge proxy - fee accounting and request dispatch."""

from bridge.dispatcher import BridgeDispatcher, FeeQuote
from bridge.service import create_dispatcher, get_default_dispatcher

__version__ = "0.1.0"
__all__ = [
    "BridgeDispatcher",
    "FeeQuote",
    "create_dispatcher",
    "get_default_dispatcher",
    "__version__",
]
