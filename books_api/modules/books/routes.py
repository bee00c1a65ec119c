from fastapi import APIRouter, Depends, HTTPException
from typing import List
import logging

from books_api.core.dependencies import check_book_ownership, get_book_service, get_current_user, validated_body
from books_api.core.errors import StoreError
from books_api.modules.auth.schemas import CallerIdentity
from books_api.modules.books.schemas import (
    BookCreate, BookUpdate, BookResponse, BookMutationResponse, MessageResponse
)
from books_api.modules.books.service import BookService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["books"])

INVALID_BOOK = "Invalid book data"


@router.get("", response_model=List[BookResponse])
async def list_my_books(
    user: CallerIdentity = Depends(get_current_user),
    service: BookService = Depends(get_book_service)
):
    """List the caller's books, newest first"""
    try:
        return await service.list_owned(user.id)
    except StoreError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.get("/all", response_model=List[BookResponse])
async def list_all_books(service: BookService = Depends(get_book_service)):
    """Public listing of every book"""
    try:
        return await service.list_all()
    except StoreError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("", response_model=BookMutationResponse, status_code=201)
async def create_book(
    user: CallerIdentity = Depends(get_current_user),
    book_data: BookCreate = Depends(validated_body(BookCreate, INVALID_BOOK)),
    service: BookService = Depends(get_book_service)
):
    """Create a book owned by the caller"""
    try:
        book = await service.create_book(book_data, user.id)
    except StoreError as e:
        raise HTTPException(status_code=400, detail=e.message)
    logger.info("User %s created book %s", user.id, book.id)
    return BookMutationResponse(message="Book created successfully!", book=book)


@router.put("/{book_id}", response_model=BookMutationResponse)
async def update_book(
    book_id: str,
    user: CallerIdentity = Depends(get_current_user),
    book_data: BookUpdate = Depends(validated_body(BookUpdate, INVALID_BOOK)),
    service: BookService = Depends(get_book_service)
):
    """Partially update a book (owner only)"""
    await check_book_ownership(book_id, user, service)

    changes = book_data.changes()
    try:
        if not changes:
            # No changes, return existing
            book = await service.get_book(book_id)
        else:
            book = await service.update_book(book_id, user.id, changes)
    except StoreError as e:
        raise HTTPException(status_code=400, detail=e.message)

    # Deleted or re-owned since the ownership check
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return BookMutationResponse(message="Book updated!", book=book)


@router.delete("/{book_id}", response_model=MessageResponse)
async def delete_book(
    book_id: str,
    user: CallerIdentity = Depends(get_current_user),
    service: BookService = Depends(get_book_service)
):
    """Delete a book (owner only)"""
    await check_book_ownership(book_id, user, service)

    try:
        deleted = await service.delete_book(book_id, user.id)
    except StoreError as e:
        raise HTTPException(status_code=400, detail=e.message)
    if not deleted:
        raise HTTPException(status_code=404, detail="Book not found")
    logger.info("User %s deleted book %s", user.id, book_id)
    return MessageResponse(message="Book removed!")
