"""Custom exceptions for the treewatch package."""


class WatchError(Exception):
    """Base exception for all treewatch errors."""
    pass


class SubscriptionError(WatchError):
    """The filesystem subscription for a root could not be created."""
    pass


class RootNotFoundError(SubscriptionError):
    """Specified root folder does not exist."""
    pass


class RootNotDirectoryError(SubscriptionError):
    """Specified root is not a directory."""
    pass


class RootAccessError(SubscriptionError):
    """Specified root folder cannot be read or traversed."""
    pass


class SessionError(WatchError):
    """Error related to the watch session lifecycle."""
    pass


class SessionAlreadyStartedError(SessionError):
    """Watch session is already running."""
    pass


class SessionDisposedError(SessionError):
    """Watch session has been disposed and cannot be restarted."""
    pass
