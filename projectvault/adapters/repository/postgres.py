"""
PostgreSQL repository adapters - Implement PasscodeRepository and ProfileRepository.

This module provides the PostgreSQL implementation of the domain's
repository ports using psycopg3 with raw SQL.

Single-Use Design:
------------------
verify_and_consume is one UPDATE whose target row is chosen by a
``SELECT ... FOR UPDATE`` subquery. A concurrent consumer of the same row
blocks on the row lock, then re-evaluates ``consumed = FALSE`` against the
committed row and matches nothing.

Every timestamp (``created_at``, expiry checks, the purge cutoff) comes
from the injected Clock, the same clock the AuthService uses for
``expires_at`` and the cooldown window. Passcode queries never read
database ``NOW()``.

Driver errors are translated to the domain's StorageError.
"""

import logging
from datetime import datetime
from pathlib import Path
from uuid import UUID

import psycopg
from psycopg.rows import class_row
from psycopg_pool import ConnectionPool

from projectvault.adapters.clock import SystemClock
from projectvault.domain.exceptions import StorageError
from projectvault.domain.models import Passcode, Profile
from projectvault.domain.ports import Clock

logger = logging.getLogger(__name__)

_PASSCODE_COLUMNS = "id, email, code, created_at, expires_at, consumed"
_PROFILE_COLUMNS = "id, email, admission_year, student_sequence, created_at, updated_at"


class PostgresPasscodeRepository:
    """
    Implements PasscodeRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool, clock: Clock | None = None) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            clock: Source of "now"; defaults to the system clock
        """
        self._pool = pool
        self._clock = clock or SystemClock()

    def create(self, email: str, code: str, expires_at: datetime) -> Passcode:
        sql = f"""
            INSERT INTO passcodes (email, code, expires_at, consumed, created_at)
            VALUES (%s, %s, %s, FALSE, %s)
            RETURNING {_PASSCODE_COLUMNS}
        """
        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=class_row(Passcode)) as cursor:
                cursor.execute(sql, (email, code, expires_at, self._clock.now()))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise StorageError("Failed to store passcode") from e
        return row

    def find_recent(self, email: str, since: datetime) -> list[Passcode]:
        sql = f"""
            SELECT {_PASSCODE_COLUMNS}
            FROM passcodes
            WHERE email = %s AND created_at >= %s
            ORDER BY created_at DESC
        """
        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=class_row(Passcode)) as cursor:
                cursor.execute(sql, (email, since))
                return cursor.fetchall()
        except psycopg.Error as e:
            raise StorageError("Failed to read recent passcodes") from e

    def verify_and_consume(self, email: str, code: str) -> Passcode | None:
        """
        Atomically consume a matching passcode.

        The row lock taken by the subquery serializes concurrent consumers;
        the outer ``consumed = FALSE`` guard makes the update a no-op for
        every consumer but the first.

        Args:
            email: Canonical email address
            code: 6-digit passcode

        Returns:
            The consumed passcode, or None if nothing matched
        """
        sql = f"""
            UPDATE passcodes
            SET consumed = TRUE
            WHERE id = (
                SELECT id FROM passcodes
                WHERE email = %s
                  AND code = %s
                  AND consumed = FALSE
                  AND expires_at > %s
                ORDER BY created_at DESC
                LIMIT 1
                FOR UPDATE
            )
            AND consumed = FALSE
            RETURNING {_PASSCODE_COLUMNS}
        """
        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=class_row(Passcode)) as cursor:
                cursor.execute(sql, (email, code, self._clock.now()))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise StorageError("Failed to verify passcode") from e
        return row

    def purge_expired_or_consumed(self) -> int:
        sql = "DELETE FROM passcodes WHERE consumed = TRUE OR expires_at <= %s"
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (self._clock.now(),))
                conn.commit()
                return max(cursor.rowcount, 0)
        except psycopg.Error as e:
            raise StorageError("Failed to purge passcodes") from e


class PostgresProfileRepository:
    """Implements ProfileRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def get_by_id(self, profile_id: UUID) -> Profile | None:
        return self._fetch_one(
            f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE id = %s", (profile_id,)
        )

    def get_by_email(self, email: str) -> Profile | None:
        return self._fetch_one(
            f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE email = %s", (email,)
        )

    def create(self, email: str, admission_year: int, student_sequence: int) -> Profile:
        """
        Create a profile, or return the existing one for email.

        ON CONFLICT DO NOTHING lets concurrent first logins converge on the
        row that won the UNIQUE(email) race.
        """
        insert_sql = f"""
            INSERT INTO profiles (email, admission_year, student_sequence)
            VALUES (%s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_PROFILE_COLUMNS}
        """
        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=class_row(Profile)) as cursor:
                cursor.execute(insert_sql, (email, admission_year, student_sequence))
                row = cursor.fetchone()
                if row is None:
                    cursor.execute(
                        f"SELECT {_PROFILE_COLUMNS} FROM profiles WHERE email = %s", (email,)
                    )
                    row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise StorageError("Failed to create profile") from e
        return row

    def _fetch_one(self, sql: str, params: tuple) -> Profile | None:
        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=class_row(Profile)) as cursor:
                cursor.execute(sql, params)
                return cursor.fetchone()
        except psycopg.Error as e:
            raise StorageError("Failed to read profile") from e


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: projectvault/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
