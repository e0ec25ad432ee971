"""cower - a simple AUR agent."""

__app_name__ = "cower"
__version__ = "0.1.0"
