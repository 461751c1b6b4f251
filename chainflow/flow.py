"""
chainflow/flow.py
-----------------
A flow is a chain of nodes plus the position of every recipient in it.

    flow = (
        Flow("signup", bot)
        .then("name", ask_age, validator=F.text)
        .then("age", finish, validator=F.text.isdigit())
    )
    await flow.start(user, "What's your name?")
    ...
    await flow.process(message)          # from any message handler

``process`` is not serialised per recipient: two messages from the same user
handled at the same time may both act on the same position snapshot. Wrap
the dispatcher with ``SerializeByRecipient`` when strict ordering matters.
"""
from __future__ import annotations

import logging
import weakref
from typing import Any, Iterator, Optional, Tuple

from .errors import ChainEmptyError, NoTransportError, UnknownRecipientError
from .node import ENDED, UNCHANGED, FlowCallback, Node, Validator, invoke
from .positions import PositionStore
from .transport import Transport, recipient_id, recipient_key, sender_of

log = logging.getLogger(__name__)


class Flow:
    def __init__(self, flow_id: str, bot: Optional[Transport] = None):
        self._flow_id = flow_id
        self._bot = bot
        self._default_handler: Optional[FlowCallback] = None
        self.positions = PositionStore()
        self._root = Node(flow_id)
        self._root._flow = weakref.ref(self)

    def __repr__(self) -> str:
        return f"<Flow {self._flow_id!r} nodes={len(self)}>"

    def __len__(self) -> int:
        return sum(1 for _ in self.nodes())

    # ----------------------------- accessors ----------------------------------
    @property
    def flow_id(self) -> str:
        return self._flow_id

    @property
    def root(self) -> Node:
        return self._root

    @property
    def bot(self) -> Optional[Transport]:
        return self._bot

    def nodes(self) -> Iterator[Node]:
        """Real states in chain order (the root sentinel is skipped)."""
        if self._root.next is not None:
            yield from self._root.next.walk()

    # ----------------------------- building -----------------------------------
    def append(self, node: Node) -> Node:
        return self._root.append(node)

    def then(
        self,
        node_id: str,
        endpoint: Optional[FlowCallback] = None,
        validator: Validator = None,
    ) -> Flow:
        self.append(Node(node_id, endpoint=endpoint, validator=validator))
        return self

    def default_handler(self, endpoint: Optional[FlowCallback]) -> Flow:
        """Fallback used when the current node rejects a message."""
        self._default_handler = endpoint
        return self

    def search(self, node_id: str) -> Tuple[Optional[Node], bool]:
        return self._root.search_down(node_id)

    # ----------------------------- positions ----------------------------------
    def get_position(self, of: Any) -> Tuple[Optional[Node], bool]:
        return self.positions.get(recipient_key(of))

    def set_position(self, of: Any, node: Optional[Node]) -> None:
        self.positions.set(recipient_key(of), node)

    def delete_position(self, of: Any) -> None:
        self.positions.delete(recipient_key(of))

    reset = delete_position

    def ended(self, of: Any) -> bool:
        node, ok = self.get_position(of)
        return ok and node is None

    def jump(self, of: Any, node_id: str) -> bool:
        """Move a recipient straight to ``node_id``; False if there is no such node."""
        node, ok = self._root.next.search_down(node_id) if self._root.next else (None, False)
        if not ok:
            return False
        self.set_position(of, node)
        log.info("Flow %s: %s jumped to %s", self._flow_id, recipient_key(of), node_id)
        return True

    # ----------------------------- lifecycle ----------------------------------
    async def start(self, to: Any, text: str, **options: Any) -> None:
        """Send ``text`` to ``to`` and put them on the first node.

        Raises ``ChainEmptyError`` if no node was appended yet and
        ``NoTransportError`` if the flow was built without a bot. Transport
        errors are re-raised as-is and leave the position untouched.
        """
        first = self._root.next
        if first is None:
            raise ChainEmptyError(self._flow_id)
        if self._bot is None:
            raise NoTransportError(self._flow_id)

        chat_id = recipient_id(to)
        try:
            if options:
                await self._bot.send_message(chat_id, text, **options)
            else:
                await self._bot.send_message(chat_id, text)
        except Exception as exc:
            log.warning("Flow %s: start message to %s failed: %s", self._flow_id, chat_id, exc)
            raise

        self.positions.set(recipient_key(to), first)
        log.info("Flow %s started for %s", self._flow_id, chat_id)

    async def process(self, message: Any) -> bool:
        """Advance the sender of ``message`` by one step.

        Returns True when an endpoint (or the default handler) ran.
        """
        sender = sender_of(message)
        if sender is None:
            return False
        try:
            key = recipient_key(sender)
        except UnknownRecipientError as exc:
            log.debug("Flow %s: ignoring message, %s", self._flow_id, exc)
            return False

        node, ok = self.positions.get(key)
        if not ok:
            return False
        if node is None:
            self.positions.delete(key)
            log.debug("Flow %s: evicted ended position of %s", self._flow_id, key)
            return False

        if not node.check_event(message) or node.endpoint is None:
            if self._default_handler is None:
                log.debug("Flow %s: %s rejected input for %r", self._flow_id, key, node)
                return False
            callback = self._default_handler
        else:
            callback = node.endpoint

        outcome = await invoke(callback, node, message)
        if outcome is UNCHANGED:
            return True
        nxt = None if outcome is ENDED else outcome.node
        if nxt is not node:
            self.positions.set(key, nxt)
            log.debug("Flow %s: %s moved %r -> %r", self._flow_id, key, node, nxt)
        return True
