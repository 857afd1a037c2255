# flake8: noqa
import sys
from pathlib import Path

# Ensure project root is on sys.path so `oliv` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient  # noqa: E402

from oliv import app as app_module
from oliv import crud, models
from oliv.catalog import load_catalog_file
from oliv.config import CATALOG_PATH


SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
# Use StaticPool so the same in-memory database is shared across connections
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create tables in the in-memory database and load the bundled catalogs
models.Base.metadata.create_all(bind=engine)
_db = TestingSessionLocal()
crud.seed_products(_db, load_catalog_file(CATALOG_PATH))
_db.close()


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app_module.app.dependency_overrides[app_module.get_db] = override_get_db
client = TestClient(app_module.app)

MATCH_URL = "/api/match-supermarket-products"


def _ingredients(*names):
    return [{"name": n, "amount": "1", "unit": "ud"} for n in names]


def test_match_returns_products_with_wire_keys():
    res = client.post(MATCH_URL, json={"supermarket": "carrefour", "ingredients": _ingredients("pollo", "huevo", "leche")})
    assert res.status_code == 200
    products = res.json()["products"]
    assert len(products) == 3
    for p in products:
        for key in ("id", "name", "price", "image", "originalIngredient", "matchScore"):
            assert key in p


def test_match_pollo_finds_chicken_breast():
    res = client.post(MATCH_URL, json={"supermarket": "carrefour", "ingredients": _ingredients("pollo")})
    assert res.status_code == 200
    product = res.json()["products"][0]
    assert product["name"] == "Pechuga de Pollo Fileteada Carrefour 400g"
    assert product["price"] == "€4.99"
    assert product["originalIngredient"] == "pollo"
    assert product["matchScore"] >= 0.9


def test_match_supermarket_is_case_insensitive():
    res = client.post(MATCH_URL, json={"supermarket": " Lidl ", "ingredients": _ingredients("huevo")})
    assert res.status_code == 200
    assert res.json()["products"][0]["name"] == "Huevos Frescos Lidl x10"


def test_match_deduplicates_ingredients():
    res = client.post(MATCH_URL, json={"supermarket": "carrefour", "ingredients": _ingredients("Pollo", " pollo ", "huevo", "POLLO")})
    assert res.status_code == 200
    products = res.json()["products"]
    assert len(products) == 2
    # first occurrence wins
    assert {p["originalIngredient"] for p in products} == {"Pollo", "huevo"}


def test_match_unknown_ingredient_gets_placeholder():
    res = client.post(MATCH_URL, json={"supermarket": "carrefour", "ingredients": _ingredients("pollo", "zzzz")})
    assert res.status_code == 200
    products = res.json()["products"]
    # placeholder sorts last
    last = products[-1]
    assert last["name"] == "zzzz (producto genérico)"
    assert last["price"] == "Precio no disponible"
    assert last["matchScore"] == 0.1
    scores = [p["matchScore"] for p in products]
    assert scores == sorted(scores, reverse=True)


def test_match_is_deterministic():
    payload = {"supermarket": "lidl", "ingredients": _ingredients("pollo", "queso feta", "miel", "zzzz")}
    first = client.post(MATCH_URL, json=payload)
    second = client.post(MATCH_URL, json=payload)
    assert first.content == second.content


def test_match_unknown_supermarket_is_404():
    res = client.post(MATCH_URL, json={"supermarket": "nonexistent", "ingredients": _ingredients("pollo")})
    assert res.status_code == 404
    assert res.json() == {"error": "Supermarket not supported or no products found"}


def test_match_missing_parameters_is_400():
    bad_payloads = [
        {"ingredients": _ingredients("pollo")},
        {"supermarket": "carrefour"},
        {"supermarket": "carrefour", "ingredients": "pollo"},
        {"supermarket": "carrefour", "ingredients": [{"amount": "1"}]},
        {"supermarket": "", "ingredients": _ingredients("pollo")},
        [],
    ]
    for payload in bad_payloads:
        res = client.post(MATCH_URL, json=payload)
        assert res.status_code == 400, payload
        assert res.json() == {"error": "Missing required parameters"}


def test_match_empty_ingredients_is_400():
    res = client.post(MATCH_URL, json={"supermarket": "carrefour", "ingredients": []})
    assert res.status_code == 400
    assert res.json() == {"error": "Missing required parameters"}


def test_match_non_json_body_is_400():
    res = client.post(MATCH_URL, content=b"not json", headers={"content-type": "application/json"})
    assert res.status_code == 400


def test_match_accepts_numeric_amounts():
    res = client.post(MATCH_URL, json={"supermarket": "carrefour", "ingredients": [{"name": "miel", "amount": 2, "unit": "cucharadas"}]})
    assert res.status_code == 200


class BrokenCatalog:
    def get_products(self, supermarket):
        raise RuntimeError("catalog backend down")

    def supermarkets(self):
        raise RuntimeError("catalog backend down")


def test_unexpected_error_is_json_500():
    # unhandled errors reach the app-level handler; keep the client from re-raising them
    failing_client = TestClient(app_module.app, raise_server_exceptions=False)
    app_module.app.dependency_overrides[app_module.get_catalog] = lambda: BrokenCatalog()
    try:
        res = failing_client.post(MATCH_URL, json={"supermarket": "carrefour", "ingredients": _ingredients("pollo")})
        assert res.status_code == 500
        assert res.json() == {"error": "Internal server error"}
        assert res.headers.get("access-control-allow-origin") == "*"

        res = failing_client.post("/api/compare", json={"ingredients": _ingredients("pollo")})
        assert res.status_code == 500
        assert res.json() == {"error": "Internal server error"}

        res = failing_client.get("/api/supermarkets")
        assert res.status_code == 500
        assert res.json() == {"error": "Internal server error"}
    finally:
        app_module.app.dependency_overrides.pop(app_module.get_catalog, None)


def test_options_request_returns_empty_200():
    res = client.options(MATCH_URL)
    assert res.status_code == 200
    assert res.content == b""


def test_cors_preflight_is_empty_200():
    res = client.options(
        MATCH_URL,
        headers={
            "Origin": "https://app.oliv.ai",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type, apikey",
        },
    )
    assert res.status_code == 200
    assert res.content == b""
    assert res.headers.get("access-control-allow-origin") == "*"
    assert "apikey" in res.headers.get("access-control-allow-headers", "")


def test_cors_preflight_with_unlisted_header_is_still_200():
    res = client.options(
        "/api/compare",
        headers={
            "Origin": "https://app.oliv.ai",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "x-custom",
        },
    )
    assert res.status_code == 200
    assert res.content == b""


def test_list_supermarkets():
    res = client.get("/api/supermarkets")
    assert res.status_code == 200
    assert res.json() == {"supermarkets": ["carrefour", "lidl"]}


def test_compare_orders_cheapest_basket_first():
    res = client.post("/api/compare", json={"ingredients": _ingredients("pollo", "huevo", "leche")})
    assert res.status_code == 200
    quotes = res.json()["supermarkets"]
    assert [q["supermarket"] for q in quotes] == ["lidl", "carrefour"]
    lidl, carrefour = quotes
    assert lidl["total"] == 6.43
    assert carrefour["total"] == 8.73
    assert lidl["matched"] == 3 and lidl["missing"] == 0
    assert len(lidl["products"]) == 3


def test_compare_empty_ingredients_is_400():
    res = client.post("/api/compare", json={"ingredients": []})
    assert res.status_code == 400
