"""FastAPI application."""

from __future__ import annotations

from fastapi import FastAPI

from server.routers import books

app = FastAPI(
    title="wpbook",
    description="Assemble WordPress book hierarchies into printable documents.",
)
app.include_router(books.router)
