"""git2go — install and configure git on a developer workstation."""

__version__ = "0.1.0"
