"""
Custom Exceptions for the ScopePerth dashboard

Provides a hierarchy of exceptions for standardized error handling across all modules.

Exception Hierarchy:
    ScopePerthError (base)
    ├── ConfigurationError
    ├── DataSourceError
    │   └── FetchError
    ├── DatabaseError
    │   └── DatabaseConnectionError
    ├── PreferenceError
    └── ValidationError
"""


class ScopePerthError(Exception):
    """Base exception for all ScopePerth errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


# Configuration Errors
class ConfigurationError(ScopePerthError):
    """Raised when there's a configuration problem."""

    pass


# Remote data store errors
class DataSourceError(ScopePerthError):
    """Base exception for remote data store errors."""

    pass


class FetchError(DataSourceError):
    """Raised when a read against the data store fails."""

    def __init__(self, message: str, source: str = None):
        self.source = source
        super().__init__(message)


# Local preference database errors
class DatabaseError(ScopePerthError):
    """Base exception for database-related errors."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when unable to connect to the database."""

    pass


class PreferenceError(ScopePerthError):
    """Raised when a stored preference blob cannot be decoded."""

    def __init__(self, message: str, key: str = None):
        self.key = key
        super().__init__(message)


# Validation Errors
class ValidationError(ScopePerthError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = None, value=None):
        self.field = field
        self.value = value
        super().__init__(message)
