"""Exceptions raised while building scenes.

Ray misses and absorbed paths are ordinary ``None`` results and never
raise; these cover construction-time mistakes only.
"""


class LumenForgeError(Exception):
    """Base class for lumenforge errors."""
    pass


class GeometryError(LumenForgeError, ValueError):
    """Invalid primitive or medium parameters."""
    pass


class EmptySceneError(LumenForgeError):
    """An operation needs at least one member in the aggregate."""
    pass
