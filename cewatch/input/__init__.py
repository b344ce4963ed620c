"""Input-layer public API: raw key decoding, event bridge and key dispatch."""

from .bridge import InputBridge, InputClosed, InputEvent, KeyPress, Resize
from .key_registry import KeyComboBinding, KeyComboRegistry
from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, has_pending_input, read_key

__all__ = [
    "read_key",
    "has_pending_input",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "InputBridge",
    "InputEvent",
    "InputClosed",
    "KeyPress",
    "Resize",
    "KeyComboBinding",
    "KeyComboRegistry",
]
