"""Exceptions raised while bootstrapping the SDK and emulator."""


class BootstrapError(Exception):
    """Base class for every fatal bootstrap failure."""


class NotFoundError(BootstrapError):
    """SDK root or a required tool could not be found."""


class DownloadError(BootstrapError):
    """Command-line tools archive could not be fetched."""


class ExtractError(BootstrapError):
    """Command-line tools archive could not be unpacked or has no tool directory."""


class InstallError(BootstrapError):
    """sdkmanager exited with a nonzero status."""


class CreationError(BootstrapError):
    """avdmanager exited with a nonzero status."""


class LaunchError(NotFoundError):
    """Emulator binary is missing from the SDK."""
