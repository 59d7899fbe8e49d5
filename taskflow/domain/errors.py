"""Errors raised by the notification use cases."""


class NotFoundError(LookupError):
    """The referenced notification, user or project does not exist."""


class AccessDeniedError(PermissionError):
    """The caller is not allowed to act on the referenced resource."""


class DeliveryError(RuntimeError):
    """A live channel could not accept an event.

    Always handled inside the connection registry; it never reaches the code
    that produced the event.
    """


__all__ = ["AccessDeniedError", "DeliveryError", "NotFoundError"]
