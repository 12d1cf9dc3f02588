"""FastAPI application exposing expense tracking endpoints."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from expense_tracker import __version__

from . import crud, database, schemas

LOG = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    database.init_db()
    LOG.info("Table 'expenses' is ready")
    yield


app = FastAPI(title="Expense Tracker Backend", version=__version__, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    LOG.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "Expense Tracker Backend is running!"


@app.get("/expenses", response_model=List[schemas.ExpenseRead])
def list_expenses(db: Session = Depends(database.get_db)) -> List[schemas.ExpenseRead]:
    return crud.list_expenses(db)


@app.post(
    "/expenses",
    response_model=schemas.ExpenseRead,
    status_code=status.HTTP_201_CREATED,
)
def create_expense(expense_in: schemas.ExpenseCreate, db: Session = Depends(database.get_db)) -> schemas.ExpenseRead:
    expense = crud.create_expense(db, expense_in)
    LOG.info("Expense %s added", expense.id)
    return expense


@app.get("/expenses/{expense_id}", response_model=schemas.ExpenseRead)
def get_expense(expense_id: int, db: Session = Depends(database.get_db)) -> schemas.ExpenseRead:
    try:
        return crud.get_expense(db, expense_id)
    except crud.EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@app.put("/expenses/{expense_id}", response_model=schemas.ExpenseRead)
def replace_expense(
    expense_id: int,
    replace_in: schemas.ExpenseReplace,
    db: Session = Depends(database.get_db),
) -> schemas.ExpenseRead:
    try:
        expense = crud.replace_expense(db, expense_id, replace_in)
    except crud.EntityNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    LOG.info("Expense %s updated", expense_id)
    return expense


@app.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: int, db: Session = Depends(database.get_db)) -> None:
    if crud.delete_expense(db, expense_id):
        LOG.info("Expense %s deleted", expense_id)
    else:
        LOG.debug("Expense %s was already absent", expense_id)


@app.get("/health", tags=["system"])
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


def main(host: str = "127.0.0.1", port: int = 5000) -> None:
    """Entrypoint for running the development server."""

    import uvicorn

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
