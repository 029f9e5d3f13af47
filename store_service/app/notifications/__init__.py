from .dispatcher import (
    NotificationDispatcher,
    NotifierInterface,
    WebhookChannel,
    get_notifier,
    shutdown_notifier,
)

__all__ = [
    "NotificationDispatcher",
    "NotifierInterface",
    "WebhookChannel",
    "get_notifier",
    "shutdown_notifier",
]
