"""
Analysis Errors

Every failure the orchestrator can surface, each carrying the HTTP status the
routes translate it to.
"""


class AnalysisError(Exception):
    """Base class for analysis pipeline errors."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFound(AnalysisError):
    """Company, competitor or content item missing or not owned by the user."""

    status_code = 404


class InvalidState(AnalysisError):
    """A prerequisite is missing (no website, no competitors, ...)."""

    status_code = 400


class ProviderDegraded(AnalysisError):
    """Metrics provider failed; logged and replaced with zeroed metrics."""

    status_code = 503


class GenerationFailed(AnalysisError):
    """AI provider failed or returned unusable output. Nothing was persisted."""

    status_code = 502


class PersistenceFailed(AnalysisError):
    """Record store write failed."""

    status_code = 500
