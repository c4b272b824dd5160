class GameHavenError(Exception):
    """Base exception for GameHaven"""
    pass


class ConfigurationError(GameHavenError):
    """Raised when there's an error in configuration"""
    pass


class StorageError(GameHavenError):
    """Raised when the local store fails during a unit of work"""
    pass


class SessionStoreError(GameHavenError):
    """Raised when a session or preference file can't be read or written"""
    pass
