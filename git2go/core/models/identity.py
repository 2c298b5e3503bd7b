"""
Git identity — the attribution pair stored in the global git config.
"""

from __future__ import annotations

from pydantic import BaseModel


class GitIdentity(BaseModel):
    """Global ``user.name`` / ``user.email``. Either may be empty."""

    name: str = ""
    email: str = ""
