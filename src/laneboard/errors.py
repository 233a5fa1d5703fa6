"""Exception hierarchy for laneboard."""


class LaneboardError(Exception):
    """Base class for all laneboard errors."""


class InvalidMoveError(LaneboardError, IndexError):
    """A move referenced an index or id that does not exist.

    These are programming errors: the caller built a move from an
    inconsistent drag session or a stale board.
    """


class DragStateError(LaneboardError, RuntimeError):
    """A drag transition was requested from the wrong state."""


class PersistenceError(LaneboardError):
    """The backend rejected or failed to store a change."""


class BoardNotFoundError(PersistenceError):
    """The requested board does not exist in the backend."""


class ChannelError(LaneboardError):
    """The real-time channel cannot carry the requested event."""
