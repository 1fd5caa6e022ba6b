# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and exposes the handful of table operations the services need:
# - select with equality / membership filters and ordering
# - single-row fetch
# - insert / update / upsert / delete
#
# Every failure is re-raised as SupabaseClientError so services can decide
# how to surface it. Nothing here retries.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   rows = SupabaseClient.select("sections", filters={"user_id": uid}, order="order_index")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: what failed, and how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        sections = SupabaseClient.select(
            "sections",
            filters={"user_id": user_id, "is_active": True},
            order="order_index",
        )

        SupabaseClient.upsert(
            "section_links",
            [{"section_id": sid, "link_id": lid, "order_index": 0}],
            on_conflict="section_id,link_id",
        )
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Ownership is therefore enforced by the services, which always
        filter on user_id.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize(cls, value: Any) -> Any:
        """Convert UUIDs (also inside lists) to strings for queries."""
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, (list, tuple, set)):
            return [cls._normalize(v) for v in value]
        return value

    @classmethod
    def _apply_filters(
        cls,
        query: Any,
        filters: dict[str, Any] | None,
        in_filters: dict[str, list[Any]] | None,
    ) -> Any:
        for column, value in (filters or {}).items():
            if value is None:
                query = query.is_(column, "null")
            else:
                query = query.eq(column, cls._normalize(value))
        for column, values in (in_filters or {}).items():
            query = query.in_(column, cls._normalize(values))
        return query

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def select(
        cls,
        table: str,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        in_filters: dict[str, list[Any]] | None = None,
        order: str | None = None,
        desc: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch rows from a table.

        Args:
            table: Table name
            columns: PostgREST column list
            filters: column -> value equality filters (None means IS NULL)
            in_filters: column -> list of accepted values
            order: Column to order by
            desc: Descending order when True
            limit: Maximum number of rows

        Returns:
            List of row dicts (empty when nothing matches)

        Raises:
            SupabaseClientError: If the query fails
        """
        client = cls.get_client()

        try:
            query = client.table(table).select(columns)
            query = cls._apply_filters(query, filters, in_filters)
            if order:
                query = query.order(order, desc=desc)
            if limit is not None:
                query = query.limit(limit)

            response = query.execute()
            rows = response.data or []
            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="SELECT_FAILED",
                suggestion=f"Check that the {table} table is accessible",
                details={"table": table, "filters": cls._normalize(list((filters or {}).keys()))}
            )

    @classmethod
    def fetch_one(
        cls,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch a single row, or None when no row matches.

        Raises:
            SupabaseClientError: If the query fails for any other reason
        """
        client = cls.get_client()

        try:
            query = client.table(table).select(columns)
            query = cls._apply_filters(query, filters, None)
            response = query.limit(1).single().execute()
            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch row from {table}: {e}",
                code="FETCH_ONE_FAILED",
                details={"table": table, "filters": {k: cls._normalize(v) for k, v in filters.items()}}
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert(
        cls,
        table: str,
        rows: dict[str, Any] | list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """
        Insert one or more rows.

        Returns:
            Inserted rows with generated columns (id, created_at)

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()
        payload = rows if isinstance(rows, list) else [rows]

        try:
            response = client.table(table).insert(payload).execute()
            logger.debug(f"Inserted {len(payload)} rows into {table}")
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table, "row_count": len(payload)}
            )

    @classmethod
    def update(
        cls,
        table: str,
        values: dict[str, Any],
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """
        Update rows matching the equality filters.

        Returns:
            Updated rows (empty when nothing matched)

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()

        try:
            query = client.table(table).update(values)
            query = cls._apply_filters(query, filters, None)
            response = query.execute()
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table}: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "columns": sorted(values.keys())}
            )

    @classmethod
    def upsert(
        cls,
        table: str,
        rows: list[dict[str, Any]],
        on_conflict: str,
    ) -> list[dict[str, Any]]:
        """
        Insert-or-update a batch of rows keyed by `on_conflict`.

        Args:
            table: Table name
            rows: Full rows to write
            on_conflict: Comma-separated unique key columns (e.g. "section_id,link_id")

        Raises:
            SupabaseClientError: If upsert fails
        """
        client = cls.get_client()

        try:
            response = client.table(table).upsert(rows, on_conflict=on_conflict).execute()
            logger.debug(f"Upserted {len(rows)} rows into {table}")
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to upsert into {table}: {e}",
                code="UPSERT_FAILED",
                details={"table": table, "row_count": len(rows), "on_conflict": on_conflict}
            )

    @classmethod
    def delete(
        cls,
        table: str,
        filters: dict[str, Any],
        in_filters: dict[str, list[Any]] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Delete rows matching the filters.

        Refuses to run without any filter so a whole table is never wiped.

        Raises:
            SupabaseClientError: If delete fails
        """
        if not filters and not in_filters:
            raise SupabaseClientError(
                message=f"Refusing unfiltered delete on {table}",
                code="UNFILTERED_DELETE",
                suggestion="Pass at least one filter"
            )

        client = cls.get_client()

        try:
            query = client.table(table).delete()
            query = cls._apply_filters(query, filters, in_filters)
            response = query.execute()
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete from {table}: {e}",
                code="DELETE_FAILED",
                details={"table": table}
            )
