class HealthLensError(Exception):
    """Base class for errors surfaced to API callers."""


class MissingImageError(HealthLensError):
    def __init__(self, message: str = "No image provided"):
        super().__init__(message)


class StoreUnavailableError(HealthLensError):
    def __init__(self, message: str = "Database not connected"):
        super().__init__(message)


class NoRecordsFoundError(HealthLensError):
    def __init__(self, message: str = "The database is empty or the collection doesn't exist"):
        super().__init__(message)
