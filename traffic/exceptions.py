# traffic/exceptions.py

class TrafficError(Exception):
    """Base exception for traffic reporting errors."""
    pass


class ConsensusUsageError(TrafficError, ValueError):
    """Raised when compute_consensus is called with arguments outside its contract."""
    pass


class ImmutableReportError(TrafficError):
    """Raised on any attempt to change or remove a stored traffic report."""
    pass


class InvalidTrafficLevel(TrafficError):
    """Raised when a submitted level is not a known traffic level."""
    def __init__(self, level):
        self.level = level
        super().__init__(f"'{level}' is not a valid traffic level.")


class ReportFetchError(TrafficError):
    """Raised when reports could not be read. Never means 'no reports'."""
    def __init__(self, field_id, cause=None):
        self.field_id = field_id
        self.cause = cause
        super().__init__(f"Could not fetch traffic reports for field {field_id}.")
