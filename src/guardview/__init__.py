"""guardview - live terminal dashboard for AdGuard Home."""

__version__ = "0.1.0"
