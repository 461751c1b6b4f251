"""Per‑recipient conversational state machines for aiogram bots."""
from .errors import (
    ChainEmptyError,
    FlowError,
    NodeLinkedError,
    NoTransportError,
    UnknownRecipientError,
)
from .flow import Flow
from .node import ENDED, UNCHANGED, Continue, Node, Signal
from .positions import PositionStore, RWLock
from .transport import Transport, recipient_id, recipient_key

__all__ = [
    "ChainEmptyError",
    "Continue",
    "ENDED",
    "Flow",
    "FlowError",
    "Node",
    "NodeLinkedError",
    "NoTransportError",
    "PositionStore",
    "RWLock",
    "Signal",
    "Transport",
    "UNCHANGED",
    "UnknownRecipientError",
    "recipient_id",
    "recipient_key",
]
