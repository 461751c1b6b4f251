"""Exceptions raised by the flow machinery."""


class FlowError(Exception):
    """Base class for every chainflow error."""


class ChainEmptyError(FlowError):
    def __init__(self, flow_id: str = ""):
        super().__init__(f"chain {flow_id!r} has zero handlers")
        self.flow_id = flow_id


class NodeLinkedError(FlowError):
    """Raised when a node that already sits in a chain is appended again."""


class UnknownRecipientError(FlowError, TypeError):
    pass


class NoTransportError(FlowError):
    def __init__(self, flow_id: str = ""):
        super().__init__(f"flow {flow_id!r} has no bot attached, cannot send messages")
        self.flow_id = flow_id
