"""User records (read-only for reconciliation)."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import UserRole


@dataclass(frozen=True, slots=True, kw_only=True)
class User:
    uid: str
    email: str | None = None
    role: UserRole = UserRole.USER
