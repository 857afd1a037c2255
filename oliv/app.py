# flake8: noqa

from fastapi import FastAPI, Depends, Request, Response
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
import json
import logging

from . import crud, schemas
from .catalog import CatalogSource, DatabaseCatalog, load_catalog_file
from .config import CATALOG_PATH
from .db import SessionLocal, init_db
from .errors import OlivError, InternalError, ValidationError
from .matcher import match_ingredients
from .pricing import compare_supermarkets

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize DB once at startup and seed the bundled catalogs into an empty table
    init_db()
    db = SessionLocal()
    try:
        if crud.count_products(db) == 0:
            added = crud.seed_products(db, load_catalog_file(CATALOG_PATH))
            logger.info(f"Seeded {added} catalog products from {CATALOG_PATH}")
    finally:
        db.close()
    yield


app = FastAPI(title="Oliv.ai supermarket matcher", lifespan=lifespan)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

# Browser clients call the API directly from any origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


# Registered after CORSMiddleware so it runs first: every OPTIONS, preflight
# or not, gets an empty 200 whatever headers the browser asks for
@app.middleware("http")
async def answer_options(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    return await call_next(request)


@app.exception_handler(OlivError)
async def oliv_error_handler(request: Request, exc: OlivError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    # runs outside CORSMiddleware, so the CORS headers are added here
    logger.exception(f"Unexpected error handling {request.method} {request.url.path}")
    err = InternalError()
    return JSONResponse(status_code=err.status_code, content={"error": err.message}, headers=CORS_HEADERS)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_catalog(db: Session = Depends(get_db)) -> CatalogSource:
    return DatabaseCatalog(db)


async def read_payload(request: Request, model):
    # Parse by hand so malformed bodies map to our 400 payload instead of FastAPI's 422
    try:
        payload = await request.json()
        return model.model_validate(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, PydanticValidationError) as exc:
        logger.warning(f"Rejected {request.url.path} request: {exc}")
        raise ValidationError() from exc


@app.post('/api/match-supermarket-products', response_model=schemas.MatchResponse)
async def match_supermarket_products(request: Request, catalog: CatalogSource = Depends(get_catalog)):
    body = await read_payload(request, schemas.MatchRequest)
    logger.info(f"Matching {len(body.ingredients)} ingredients at {body.supermarket}")
    products = match_ingredients(body.supermarket, body.ingredients, catalog)
    return schemas.MatchResponse(products=products)


@app.post('/api/compare', response_model=schemas.CompareResponse)
async def compare(request: Request, catalog: CatalogSource = Depends(get_catalog)):
    body = await read_payload(request, schemas.CompareRequest)
    quotes = compare_supermarkets(body.ingredients, catalog)
    return schemas.CompareResponse(supermarkets=quotes)


@app.get('/api/supermarkets', response_model=schemas.SupermarketList)
def list_supermarkets(catalog: CatalogSource = Depends(get_catalog)):
    return schemas.SupermarketList(supermarkets=catalog.supermarkets())
