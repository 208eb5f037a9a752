"""Error taxonomy for the catalog, selection and chat components.

None of these are meant to escape a session: the session shell catches each
one at the boundary where it can still leave the state consistent.
"""


class RoutineBuilderError(Exception):
    """Base class for every error raised by routine_builder."""


class FetchError(RoutineBuilderError):
    """Catalog source unreachable or not shaped like ``{"products": [...]}``."""


class StorageError(RoutineBuilderError):
    """Durable key-value storage could not be read or written."""


class EmptySelectionError(RoutineBuilderError):
    """A routine was requested with nothing selected."""


class ChatBackendError(RoutineBuilderError):
    """The chat backend did not produce a reply."""


class NetworkError(ChatBackendError):
    """Transport-level failure talking to the chat backend."""


class ProviderError(ChatBackendError):
    """Chat backend answered non-2xx or with an unusable payload."""
