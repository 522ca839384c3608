"""Repository adapters - Database implementations."""

from .memory import InMemoryPasscodeRepository, InMemoryProfileRepository
from .postgres import PostgresPasscodeRepository, PostgresProfileRepository, run_migrations

__all__ = [
    "InMemoryPasscodeRepository",
    "InMemoryProfileRepository",
    "PostgresPasscodeRepository",
    "PostgresProfileRepository",
    "run_migrations",
]
