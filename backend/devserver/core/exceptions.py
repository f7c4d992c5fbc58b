"""Startup-fatal errors."""


class StartupError(Exception):
    """The process cannot start serving and must exit non-zero.

    Raised for bind failures and signal handler installation failures.
    """
