"""
Books table access through the Supabase store client.

Expected Supabase table structure (books):
- id: uuid or bigint (primary key, generated)
- title: text (not null)
- author: text (not null)
- pages: integer (not null, > 0)
- year: integer (not null, 0..2100)
- owner_id: uuid (references auth.users.id, not null) - creator/owner
- created_at: timestamptz (default: now())
"""

import logging
from typing import List, Optional

from supabase import AsyncClient, PostgrestAPIError

from books_api.core.errors import StoreError
from books_api.modules.books.schemas import BookCreate, BookId, BookOwnership, BookResponse

logger = logging.getLogger(__name__)

TABLE = "books"


class BookService:
    def __init__(self, supabase: AsyncClient):
        self.supabase = supabase

    async def list_owned(self, owner_id: str) -> List[BookResponse]:
        """List the caller's books, newest first"""
        try:
            result = await self.supabase.table(TABLE)\
                .select("*")\
                .eq("owner_id", owner_id)\
                .order("created_at", desc=True)\
                .execute()
        except PostgrestAPIError as e:
            raise self._store_error("list owned books", e) from e
        return [BookResponse(**book) for book in result.data or []]

    async def list_all(self) -> List[BookResponse]:
        """List every book regardless of owner, newest first"""
        try:
            result = await self.supabase.table(TABLE)\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
        except PostgrestAPIError as e:
            raise self._store_error("list books", e) from e
        return [BookResponse(**book) for book in result.data or []]

    async def create_book(self, book_data: BookCreate, owner_id: str) -> BookResponse:
        """Insert a book owned by ``owner_id``; id and created_at come from the table"""
        try:
            result = await self.supabase.table(TABLE)\
                .insert({**book_data.model_dump(), "owner_id": owner_id})\
                .execute()
        except PostgrestAPIError as e:
            raise self._store_error("create book", e) from e
        if not result.data:
            raise StoreError("Failed to create book")
        return BookResponse(**result.data[0])

    async def get_ownership(self, book_id: BookId) -> Optional[BookOwnership]:
        """Return id and owner of a book, or None when it cannot be found.

        Lookup errors (a malformed id, for instance) count as not found.
        """
        try:
            result = await self.supabase.table(TABLE)\
                .select("id, owner_id")\
                .eq("id", book_id)\
                .limit(1)\
                .execute()
        except PostgrestAPIError as e:
            logger.info("Ownership lookup for book %s failed: %s", book_id, e.message)
            return None
        if not result.data:
            return None
        return BookOwnership(**result.data[0])

    async def get_book(self, book_id: BookId) -> Optional[BookResponse]:
        try:
            result = await self.supabase.table(TABLE)\
                .select("*")\
                .eq("id", book_id)\
                .limit(1)\
                .execute()
        except PostgrestAPIError as e:
            raise self._store_error("get book", e) from e
        if not result.data:
            return None
        return BookResponse(**result.data[0])

    async def update_book(self, book_id: BookId, owner_id: str, changes: dict) -> Optional[BookResponse]:
        """Apply ``changes`` if the book still belongs to ``owner_id``; None when no row matched"""
        try:
            result = await self.supabase.table(TABLE)\
                .update(changes)\
                .eq("id", book_id)\
                .eq("owner_id", owner_id)\
                .execute()
        except PostgrestAPIError as e:
            raise self._store_error("update book", e) from e
        if not result.data:
            return None
        return BookResponse(**result.data[0])

    async def delete_book(self, book_id: BookId, owner_id: str) -> bool:
        """Delete the book if it still belongs to ``owner_id``"""
        try:
            result = await self.supabase.table(TABLE)\
                .delete()\
                .eq("id", book_id)\
                .eq("owner_id", owner_id)\
                .execute()
        except PostgrestAPIError as e:
            raise self._store_error("delete book", e) from e
        return len(result.data or []) > 0

    @staticmethod
    def _store_error(action: str, e: PostgrestAPIError) -> StoreError:
        logger.warning("Failed to %s: %s", action, e.message)
        return StoreError(e.message or str(e))
