"""
This module  is the main entry point for the FastAPI application.
It initializes the FastAPI app, creates the MongoDB client at startup
and defines the /api/filmes endpoints for listing, filtering, creating,
updating and deleting movies.
Each endpoint handles its own failures and maps them to HTTP responses.
app.main.py
"""
import logging
from contextlib import asynccontextmanager
from typing import Any

from bson.errors import BSONError
from fastapi import APIRouter, Body, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from app.db import LOG_LEVEL, create_client, get_movie_collection
from app.movie_service import (
    create_movie_doc,
    delete_movie_doc,
    find_by_razao,
    find_by_user_id,
    list_movies,
    store_error_payload,
    update_movie_doc,
)
from app.validation import errors_by_field, validate_movie

logger = logging.getLogger(__name__)

STORE_ERRORS = (PyMongoError, BSONError)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=LOG_LEVEL)
    client = create_client()
    app.state.mongo_client = client
    app.state.collection = get_movie_collection(client)
    logger.info("MongoDB client ready: collection=%s", app.state.collection.full_name)
    yield
    client.close()


def get_collection(request: Request):
    return request.app.state.collection

def get_client(request: Request):
    return request.app.state.mongo_client


def _store_error(exc):
    logger.warning("Store error: %s", exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=store_error_payload(exc))

# a missing or non-object body is validated as an empty movie
def _candidate(payload):
    return dict(payload) if isinstance(payload, dict) else {}

def _validation_error(status_code, errors):
    logger.info("Invalid movie payload: %s", errors_by_field(errors))
    return JSONResponse(
        status_code=status_code,
        content={"errors": [error.model_dump(exclude_unset=True) for error in errors]},
    )


router = APIRouter(prefix="/api/filmes", tags=["filmes"])

@router.get("", status_code=status.HTTP_200_OK)
@router.get("/", status_code=status.HTTP_200_OK, include_in_schema=False)
def list_all(collection=Depends(get_collection)):
    try:
        return list_movies(collection)
    except Exception as e:
        logger.exception("Failed to list movies")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "errors": [
                    {
                        "value": str(e),
                        "msg": "Erro ao obter a listagem dos filmes",
                        "param": "/",
                    }
                ]
            },
        )

@router.get("/user_id/{user_id}", status_code=status.HTTP_200_OK)
def filter_by_user_id(user_id: str, collection=Depends(get_collection)):
    try:
        return find_by_user_id(collection, user_id)
    except STORE_ERRORS as e:
        return _store_error(e)
    except Exception as e:
        logger.exception("Failed to filter movies by user_id")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(e)})

@router.get("/razao/{razao}", status_code=status.HTTP_200_OK)
def filter_by_razao(razao: str, collection=Depends(get_collection)):
    try:
        return find_by_razao(collection, razao)
    except STORE_ERRORS as e:
        return _store_error(e)
    except Exception as e:
        logger.exception("Failed to filter movies by razao_social")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(e)})

@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create(payload: Any = Body(None), collection=Depends(get_collection)):
    movie, errors = validate_movie(_candidate(payload))
    if errors:
        return _validation_error(status.HTTP_400_BAD_REQUEST, errors)
    try:
        return create_movie_doc(collection, movie)
    except STORE_ERRORS as e:
        return _store_error(e)

@router.put("", status_code=status.HTTP_202_ACCEPTED)
@router.put("/", status_code=status.HTTP_202_ACCEPTED, include_in_schema=False)
def update(payload: Any = Body(None), collection=Depends(get_collection)):
    fields = _candidate(payload)
    movie_id = fields.pop("_id", None)
    movie, errors = validate_movie(fields)
    if errors:
        # existing clients expect 403 here, unlike the 400 of create
        return _validation_error(status.HTTP_403_FORBIDDEN, errors)
    try:
        return update_movie_doc(collection, movie_id, movie)
    except STORE_ERRORS as e:
        return _store_error(e)

@router.delete("/{movie_id}", status_code=status.HTTP_202_ACCEPTED)
def delete(movie_id: str, collection=Depends(get_collection)):
    try:
        return delete_movie_doc(collection, movie_id)
    except STORE_ERRORS as e:
        return _store_error(e)


app = FastAPI(title="Filmes API", lifespan=lifespan)

@app.get("/health")
def health(client=Depends(get_client)):
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        logger.warning("MongoDB ping failed: %s", e)
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"status": "unavailable"})
    return {"status": "ok"}

app.include_router(router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="localhost", port=8000, reload=True)
