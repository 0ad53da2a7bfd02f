# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides typed access to the Supabase project backing the site:
# - SupabaseClient: singleton service-role client plus fresh anon clients
#   for Supabase Auth calls
# - SupabaseRowStore: RowStore implementation over PostgREST tables
# - SupabaseObjectStore: ObjectStore implementation over a Storage bucket
#
# The supabase client is synchronous. The stores run each request in a worker
# thread so a slow call suspends only the operation that issued it.
#
# Usage:
#   from lib.supabase_client import SupabaseRowStore
#   rows = await SupabaseRowStore().select("services", order=Order("created_at"))
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from supabase import create_client, Client

from app.config import settings
from lib.backend import Filter, Order

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
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
            result += f"\n  Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Access point for Supabase clients.

    Implements singleton pattern for the service-role client - one instance is
    shared across the application. Auth calls that establish a user session
    get a fresh anon client so no session state leaks between admins.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

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
    def create_anon_client(cls) -> Client:
        """
        Create a new client with the anon key for Supabase Auth calls.

        Raises:
            SupabaseClientError: If client creation fails
        """
        try:
            return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str) -> dict[str, Any] | None:
        """
        Fetch a row of the profiles table.

        Returns:
            Profile dict, or None if the auth user has no profile row yet

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("profiles")
                .select("id, email, role, created_at")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                suggestion="Check that the profiles table exists and is accessible",
                details={"user_id": user_id}
            )


# =============================================================================
# Row Store
# =============================================================================

class SupabaseRowStore:
    """RowStore backed by PostgREST tables of the Supabase project."""

    def __init__(self, client: Client | None = None):
        self._client = client

    @property
    def client(self) -> Client:
        return self._client or SupabaseClient.get_client()

    @staticmethod
    def _apply_filters(query: Any, filters: Sequence[Filter]) -> Any:
        for f in filters:
            if f.op == "in":
                query = query.in_(f.column, list(f.value))
            else:
                query = query.eq(f.column, f.value)
        return query

    async def _execute(self, query: Any, action: str, table: str) -> list[dict[str, Any]]:
        try:
            response = await asyncio.to_thread(query.execute)
        except Exception as e:
            logger.error(f"Supabase {action} on {table} failed: {e}")
            raise SupabaseClientError(
                message=f"Failed to {action} {table}: {e}",
                code=f"{action.upper()}_FAILED",
                suggestion="Check the table exists and the service key has access",
                details={"table": table},
            )
        return response.data or []

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Order | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        query = self._apply_filters(self.client.table(table).select(columns), filters)
        if order is not None:
            query = query.order(order.column, desc=order.descending)
        if limit is not None:
            query = query.limit(limit)

        rows = await self._execute(query, "select", table)
        logger.debug(f"Fetched {len(rows)} rows from {table}")
        return rows

    async def insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        query = self.client.table(table).insert(rows)
        return await self._execute(query, "insert", table)

    async def update(
        self,
        table: str,
        patch: dict[str, Any],
        filters: Sequence[Filter],
    ) -> list[dict[str, Any]]:
        query = self._apply_filters(self.client.table(table).update(patch), filters)
        return await self._execute(query, "update", table)

    async def delete(self, table: str, filters: Sequence[Filter]) -> list[dict[str, Any]]:
        query = self._apply_filters(self.client.table(table).delete(), filters)
        return await self._execute(query, "delete", table)


# =============================================================================
# Object Store
# =============================================================================

class SupabaseObjectStore:
    """ObjectStore backed by one public Supabase Storage bucket."""

    def __init__(self, bucket: str | None = None, client: Client | None = None):
        self.bucket = bucket or settings.STORAGE_BUCKET
        self._client = client

    @property
    def client(self) -> Client:
        return self._client or SupabaseClient.get_client()

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        """
        Upload raw bytes to the bucket.

        Returns:
            The storage path written

        Raises:
            SupabaseClientError: If the upload fails
        """
        file_options = {"upsert": "false"}
        if content_type:
            file_options["content-type"] = content_type

        try:
            await asyncio.to_thread(
                self.client.storage.from_(self.bucket).upload,
                path=path,
                file=content,
                file_options=file_options,
            )
        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise SupabaseClientError(
                message=f"Failed to upload {path}: {e}",
                code="STORAGE_UPLOAD_FAILED",
                suggestion=f"Check that the '{self.bucket}' bucket exists and allows uploads",
                details={"path": path, "bucket": self.bucket},
            )

        logger.info(f"Uploaded file to storage: {path}")
        return path

    def public_url(self, path: str) -> str:
        # storage3 appends a bare "?" when no transform options are given
        return self.client.storage.from_(self.bucket).get_public_url(path).rstrip("?")

    async def remove(self, paths: list[str]) -> None:
        """
        Delete objects from the bucket.

        Raises:
            SupabaseClientError: If the delete request fails
        """
        try:
            await asyncio.to_thread(self.client.storage.from_(self.bucket).remove, paths)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to remove {paths}: {e}",
                code="STORAGE_REMOVE_FAILED",
                details={"paths": paths, "bucket": self.bucket},
            )

        logger.info(f"Deleted files from storage: {paths}")

    async def check(self) -> None:
        """
        Confirm the bucket exists.

        Raises:
            SupabaseClientError: If the bucket cannot be read
        """
        try:
            await asyncio.to_thread(self.client.storage.get_bucket, self.bucket)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Bucket '{self.bucket}' is not reachable: {e}",
                code="STORAGE_UNAVAILABLE",
                suggestion=f"Create a public '{self.bucket}' bucket in Supabase Storage",
                details={"bucket": self.bucket},
            )
