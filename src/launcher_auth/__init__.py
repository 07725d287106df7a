"""Launcher Auth - account authentication for a game launcher."""

__version__ = "0.1.0"
