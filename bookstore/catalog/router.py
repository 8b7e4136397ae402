"""
Route definitions for the catalogue API.

Endpoints under /api/books:
- GET    /            : list every book
- GET    /{book_id}   : get one book
- POST   /            : create a book (multipart form, optional ``cover`` file)
- PUT    /{book_id}   : replace a book (same form as POST)
- DELETE /{book_id}   : delete a book

The routes only pull fields out of the request and hand them to the
``BookService`` stored on ``app.state``; all rules live in the service.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile

from ..models import BookForm, CoverFile
from .errors import BookNotFoundError, BookValidationError
from .schemas import Book
from .service import BookService

router = APIRouter(prefix="/api/books", tags=["books"])


def get_service(request: Request) -> BookService:
    return request.app.state.book_service


def book_form(
    title: Optional[str] = Form(default=None),
    author: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    price: Optional[str] = Form(default=None),
    original_price: Optional[str] = Form(default=None, alias="originalPrice"),
    rating: Optional[str] = Form(default=None),
    desc: Optional[str] = Form(default=None),
    keywords: Optional[str] = Form(default=None),
) -> BookForm:
    return BookForm(
        title=title,
        author=author,
        category=category,
        price=price,
        original_price=original_price,
        rating=rating,
        desc=desc,
        keywords=keywords,
    )


def _read_cover(upload: Optional[UploadFile]) -> Optional[CoverFile]:
    if upload is None:
        return None
    content = upload.file.read()
    if not content:
        return None
    return CoverFile(content=content, filename=upload.filename)


@router.get("", response_model=List[Book], response_model_exclude_none=True)
def list_books(service: BookService = Depends(get_service)) -> List[Book]:
    return service.list_books()


@router.get("/{book_id}", response_model=Book, response_model_exclude_none=True)
def get_book(book_id: int, service: BookService = Depends(get_service)) -> Book:
    try:
        return service.get_book(book_id)
    except BookNotFoundError:
        raise HTTPException(status_code=404, detail="Livre introuvable.")


@router.post("", response_model=Book, response_model_exclude_none=True)
def create_book(
    form: BookForm = Depends(book_form),
    cover: Optional[UploadFile] = File(default=None),
    service: BookService = Depends(get_service),
) -> Book:
    try:
        return service.create_book(form, _read_cover(cover))
    except BookValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{book_id}", response_model=Book, response_model_exclude_none=True)
def update_book(
    book_id: int,
    form: BookForm = Depends(book_form),
    cover: Optional[UploadFile] = File(default=None),
    service: BookService = Depends(get_service),
) -> Book:
    try:
        return service.update_book(book_id, form, _read_cover(cover))
    except BookNotFoundError:
        raise HTTPException(status_code=404, detail="Livre introuvable.")
    except BookValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{book_id}", response_class=Response)
def delete_book(book_id: int, service: BookService = Depends(get_service)):
    try:
        service.delete_book(book_id)
    except BookNotFoundError:
        raise HTTPException(status_code=404, detail="Livre introuvable.")
    return Response(status_code=200)
