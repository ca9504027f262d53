"""Identity store adapters - Self-hosted PostgreSQL and hosted GoTrue."""

from .gotrue import GoTrueIdentityStore
from .postgres import PostgresIdentityStore

__all__ = ["GoTrueIdentityStore", "PostgresIdentityStore"]
