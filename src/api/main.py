"""
FastAPI backend: REST API over the contact store.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, field_validator

from kontakti.application import ContactRepository
from kontakti.domain import (
    Contact,
    InvalidArgumentError,
    SearchCriteria,
    StorageError,
)
from kontakti.infrastructure import SqliteContactStore, default_database_path

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
)
logger = logging.getLogger(__name__)


def _get_store(app: FastAPI) -> ContactRepository:
    if getattr(app.state, "store", None) is None:
        app.state.store = SqliteContactStore(default_database_path())
    return app.state.store


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A store set before startup (tests, embedding) is kept as is.
    store = _get_store(app)
    logger.info("Serving contacts from %s", type(store).__name__)
    yield


app = FastAPI(title="Kontakti API", lifespan=lifespan)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Storage error"})


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- REST: contacts ---


class ContactBody(BaseModel):
    """Create/update payload. Name and email are required; email must look like an address."""

    name: str
    email: EmailStr
    phone_number: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value

    def to_contact(self, contact_id: int | None = None) -> Contact:
        return Contact(
            id=contact_id,
            name=self.name,
            email=self.email,
            phone_number=self.phone_number,
            address_line1=self.address_line1,
            address_line2=self.address_line2,
        )


class ContactItem(BaseModel):
    id: int
    name: str
    email: str
    phone_number: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None


def _to_item(contact: Contact) -> ContactItem:
    return ContactItem(
        id=contact.id,
        name=contact.name,
        email=contact.email,
        phone_number=contact.phone_number,
        address_line1=contact.address_line1,
        address_line2=contact.address_line2,
    )


@app.get("/contacts")
def list_contacts(request: Request):
    store = _get_store(request.app)
    return [_to_item(c) for c in store.get_all()]


@app.get("/contacts/search")
def search_contacts(
    request: Request,
    name: str | None = None,
    phone: str | None = None,
    email: str | None = None,
    exact: bool = False,
    limit: int | None = None,
    offset: int | None = None,
):
    store = _get_store(request.app)
    criteria = SearchCriteria(
        name=name,
        phone=phone,
        email=email,
        exact=exact,
        limit=limit,
        offset=offset,
    )
    return [_to_item(c) for c in store.search(criteria)]


@app.get("/contacts/{contact_id}")
def get_contact(contact_id: int, request: Request):
    store = _get_store(request.app)
    contact = store.get_by_id(contact_id)
    if contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return _to_item(contact)


@app.post("/contacts")
def create_contact(body: ContactBody, request: Request):
    store = _get_store(request.app)
    contact_id = store.create(body.to_contact())
    logger.info("Created contact %s", contact_id)
    return JSONResponse(
        content=_to_item(body.to_contact(contact_id)).model_dump(),
        status_code=201,
    )


@app.put("/contacts/{contact_id}")
def update_contact(contact_id: int, body: ContactBody, request: Request):
    store = _get_store(request.app)
    contact = body.to_contact(contact_id)
    if not store.update(contact):
        raise HTTPException(status_code=404, detail="Contact not found")
    return _to_item(contact)


@app.delete("/contacts/{contact_id}", status_code=204)
def delete_contact(contact_id: int, request: Request):
    store = _get_store(request.app)
    if not store.delete(contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return Response(status_code=204)
