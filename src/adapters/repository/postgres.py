"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Error translation:
------------------
Driver exceptions never leave this module. A UNIQUE violation on the
email column becomes EmailConflict; every other psycopg error becomes
RepositoryError, which the API reports as a generic internal error.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.account import Account
from src.domain.exceptions import EmailConflict, RepositoryError, ValidationFailed

logger = logging.getLogger(__name__)

_CODE_COLUMNS = frozenset({"registration_code", "reset_code"})

_COLUMNS = (
    "id, email, display_name, password_hash, registration_code, reset_code, "
    "profile_image, created_at, updated_at"
)


def _row_to_account(row: tuple) -> Account:
    return Account(
        id=row[0],
        email=row[1],
        display_name=row[2],
        password_hash=row[3],
        registration_code=row[4],
        reset_code=row[5],
        profile_image=bytes(row[6]) if row[6] is not None else None,
        created_at=row[7],
        updated_at=row[8],
    )


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except errors.UniqueViolation as e:
        raise EmailConflict() from e
    except psycopg.DataError as e:
        # values the column cannot hold, such as NUL characters or overlong text
        logger.warning("Repository %s rejected a value: %s", operation, e)
        raise ValidationFailed("Input contains values that cannot be stored") from e
    except psycopg.Error as e:
        logger.error("Repository %s failed: %s", operation, e)
        raise RepositoryError() from e


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def create(self, account: Account) -> Account:
        """
        Insert a new account and return it with the database-assigned id.

        The UNIQUE constraint on email is the final arbiter when two
        registrations for the same address race.
        """
        sql = f"""
            INSERT INTO accounts (email, display_name, password_hash, registration_code,
                                  reset_code, profile_image, created_at, updated_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {_COLUMNS}
        """

        with _translate_errors("create"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                sql,
                (
                    account.email,
                    account.display_name,
                    account.password_hash,
                    account.registration_code,
                    account.reset_code,
                    account.profile_image,
                    account.created_at,
                    account.updated_at,
                ),
            )
            row = cursor.fetchone()
            conn.commit()
        return _row_to_account(row)

    def get_by_id(self, account_id: int) -> Account | None:
        return self._fetch_one("id", account_id)

    def get_by_email(self, email: str) -> Account | None:
        return self._fetch_one("email", email)

    def get_by_registration_code(self, code: str) -> Account | None:
        return self._fetch_one("registration_code", code)

    def get_by_reset_code(self, code: str) -> Account | None:
        return self._fetch_one("reset_code", code)

    def update(self, account: Account) -> bool:
        """
        Write every mutable column of the account.

        Returns:
            True if the row exists and was updated, False otherwise
        """
        return self._write(account, "update")

    def consume_code(self, account: Account, column: str, code: str) -> bool:
        """
        Write the account only if `column` still holds `code`.

        The check and the write are one UPDATE statement, so concurrent
        requests spending the same code cannot both succeed.
        """
        if column not in _CODE_COLUMNS:
            raise ValueError(f"Not a code column: {column}")
        return self._write(account, f"consume {column}", f"AND {column} = %s", (code,))

    def _write(
        self,
        account: Account,
        operation: str,
        condition: str = "",
        condition_params: tuple = (),
    ) -> bool:
        sql = f"""
            UPDATE accounts
            SET email = %s,
                display_name = %s,
                password_hash = %s,
                registration_code = %s,
                reset_code = %s,
                profile_image = %s,
                updated_at = %s
            WHERE id = %s {condition}
        """

        with _translate_errors(operation), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(
                sql,
                (
                    account.email,
                    account.display_name,
                    account.password_hash,
                    account.registration_code,
                    account.reset_code,
                    account.profile_image,
                    account.updated_at,
                    account.id,
                    *condition_params,
                ),
            )
            conn.commit()
            return cursor.rowcount == 1

    def delete(self, account_id: int) -> bool:
        """Delete an account by id. Returns True if a row was removed."""
        with _translate_errors("delete"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM accounts WHERE id = %s", (account_id,))
            conn.commit()
            return cursor.rowcount == 1

    def _fetch_one(self, column: str, value: object) -> Account | None:
        # column is always one of the fixed names above, never user input
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE {column} = %s ORDER BY id LIMIT 1"

        with _translate_errors(f"lookup by {column}"), self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (value,))
            row = cursor.fetchone()
        return _row_to_account(row) if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except psycopg.Error as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
