from .event_bus import EventBus, Handler, Subscription
from .models import BusEventModel, HandlerErrorEvent, RateLimitWaitEvent

__all__ = [
    "EventBus",
    "Handler",
    "Subscription",
    "BusEventModel",
    "HandlerErrorEvent",
    "RateLimitWaitEvent",
]
