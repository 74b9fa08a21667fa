from __future__ import annotations


class AutoproxyError(RuntimeError):
    pass


class MissingAliasError(AutoproxyError):
    """Container has no network alias and cannot be routed."""


class ContainerNotFoundError(AutoproxyError):
    pass


class SignalError(AutoproxyError):
    pass


class ConfigStoreError(AutoproxyError):
    """The managed config directory cannot be opened, read or cleaned."""


class EventStreamError(AutoproxyError):
    pass
