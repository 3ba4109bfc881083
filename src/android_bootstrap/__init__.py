"""android-bootstrap: provision an Android SDK, an AVD and a running emulator."""

__version__ = "0.1.0"
