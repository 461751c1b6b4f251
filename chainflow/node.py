"""
chainflow/node.py
-----------------
One conversational state and the doubly-linked chain it lives in.

A node pairs a *validator* (does this message belong here?) with an
*endpoint* (where does the user go next?). Endpoints return an outcome:

    Continue(node)  – move the user to ``node``
    ENDED           – the flow is over, remember that it ended
    UNCHANGED       – stay where you are

A bare ``Node`` or ``None`` is accepted too and means ``Continue`` / ``ENDED``.
"""
from __future__ import annotations

import inspect
import weakref
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterator, Optional, Tuple, Union

from magic_filter import MagicFilter

from .errors import NodeLinkedError

if TYPE_CHECKING:
    from .flow import Flow


# -----------------------------------------------------------------------------
# Transition outcomes
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Continue:
    node: "Node"


class Signal(Enum):
    ENDED = "ended"
    UNCHANGED = "unchanged"


ENDED = Signal.ENDED
UNCHANGED = Signal.UNCHANGED

Outcome = Union[Continue, Signal]
Validator = Union[Callable[[Any], bool], MagicFilter, None]
FlowCallback = Callable[["Node", Any], Union[Outcome, "Node", None, Awaitable[Any]]]


def as_outcome(value: Any) -> Outcome:
    if isinstance(value, (Continue, Signal)):
        return value
    if isinstance(value, Node):
        return Continue(value)
    if value is None:
        return ENDED
    raise TypeError(f"endpoint returned {type(value).__name__}, expected an outcome or a Node")


async def invoke(callback: FlowCallback, node: "Node", message: Any) -> Outcome:
    """Run an endpoint (sync or async) and normalise what it returns."""
    result = callback(node, message)
    if inspect.isawaitable(result):
        result = await result
    return as_outcome(result)


# -----------------------------------------------------------------------------
# Node
# -----------------------------------------------------------------------------

class Node:
    """A single state in the chain.

    ``validator`` and ``endpoint`` are set at build time and treated as
    immutable afterwards, so one node can serve many users concurrently.
    """

    __slots__ = ("id", "validator", "endpoint", "next", "_prev", "_flow", "__weakref__")

    def __init__(
        self,
        node_id: str,
        endpoint: Optional[FlowCallback] = None,
        validator: Validator = None,
    ):
        self.id = node_id
        self.validator = validator
        self.endpoint = endpoint
        self.next: Optional[Node] = None
        self._prev: Optional[weakref.ref] = None
        self._flow: Optional[weakref.ref] = None

    def __repr__(self) -> str:
        return f"<Node {self.id!r}>"

    @property
    def prev(self) -> Optional[Node]:
        return self._prev() if self._prev is not None else None

    @property
    def flow(self) -> Optional["Flow"]:
        """The owning flow, if the node is attached to one."""
        return self._flow() if self._flow is not None else None

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def check_event(self, message: Any) -> bool:
        validator = self.validator
        if validator is None:
            return True
        if isinstance(validator, MagicFilter):
            return bool(validator.resolve(message))
        return bool(validator(message))

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def walk(self) -> Iterator[Node]:
        node: Optional[Node] = self
        while node is not None:
            yield node
            node = node.next

    def search_down(self, node_id: str) -> Tuple[Optional[Node], bool]:
        """Find the first node called ``node_id`` from here to the end of the chain."""
        for node in self.walk():
            if node.id == node_id:
                return node, True
        return None, False

    def tail(self) -> Node:
        last = self
        for last in self.walk():
            pass
        return last

    def append(self, node: Node) -> Node:
        """Link ``node`` after the last node of this chain and return it."""
        if node.next is not None or node.prev is not None or node._flow is not None:
            raise NodeLinkedError(f"{node!r} is already part of a chain")
        if any(n is node for n in self.walk()):
            raise NodeLinkedError(f"{node!r} would close a loop")
        tail = self.tail()
        tail.next = node
        node._prev = weakref.ref(tail)
        node._flow = self._flow
        return node
