"""Exception types raised by filesizehist."""


class FileSizeHistError(Exception):
    """Base class for all filesizehist failures."""


class ScanError(FileSizeHistError):
    """A root directory is missing, not a directory, or unreadable."""

    def __init__(self, root, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot scan {root}: {reason}")


class CacheCorruptError(FileSizeHistError):
    """The cache artifact exists but does not match the expected schema."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt cache file {path}: {reason}")


class ConfigError(FileSizeHistError):
    pass


class RegistryNotInitializedError(FileSizeHistError, RuntimeError):
    pass


class RelativizeError(FileSizeHistError, ValueError):
    pass
