from .flows import Tracked, flow_router

__all__ = ["Tracked", "flow_router"]
