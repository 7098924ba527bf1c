import pytest
import requests

import core.cocktaildb_client as cocktaildb
from core.cocktaildb_client import (
    CocktailDBError,
    best_match,
    find_cocktail_image,
    lookup_cocktail_image,
    search_cocktails,
    search_terms,
)


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def fake_api(monkeypatch):
    """Answers search.php from a {term: drinks} table and records the terms asked for."""
    calls = []
    table = {}

    def fake_get(url, params=None, headers=None, timeout=None):
        assert url.endswith("/search.php")
        calls.append(params["s"])
        return FakeResponse({"drinks": table.get(params["s"])})

    monkeypatch.setattr(cocktaildb.requests, "get", fake_get)
    return table, calls


def test_search_terms():
    assert search_terms("Rum & Coke") == ["Rum and Coke", "Rum Coke", "Rum"]
    assert search_terms("Margarita") == ["Margarita"]
    assert search_terms("  ") == []


def test_best_match_prefers_name_containing_term():
    drinks = [{"strDrink": "Frozen Daiquiri"}, {"strDrink": "Margarita"}]
    assert best_match(drinks, "margarita") == drinks[1]
    assert best_match(drinks, "mojito") == drinks[0]
    assert best_match([], "anything") is None


def test_search_returns_empty_list_when_nothing_matches(fake_api):
    assert search_cocktails("Nope") == []


def test_lookup_falls_back_to_simpler_terms(fake_api):
    table, calls = fake_api
    table["Rum"] = [
        {"strDrink": "Cuba Libre", "strDrinkThumb": "https://img/cuba.jpg"},
        {"strDrink": "Rum Punch", "strDrinkThumb": "https://img/punch.jpg"},
    ]
    assert lookup_cocktail_image("Rum & Coke") == "https://img/punch.jpg"
    assert calls == ["Rum and Coke", "Rum Coke", "Rum"]


def test_lookup_no_match(fake_api):
    assert lookup_cocktail_image("Unheard Of") is None


def test_http_errors_raise(monkeypatch):
    monkeypatch.setattr(cocktaildb.requests, "get", lambda *a, **kw: FakeResponse(status_code=503, text="down"))
    with pytest.raises(CocktailDBError):
        search_cocktails("Margarita")


def test_invalid_json_raises(monkeypatch):
    monkeypatch.setattr(cocktaildb.requests, "get", lambda *a, **kw: FakeResponse(ValueError("bad json")))
    with pytest.raises(CocktailDBError):
        search_cocktails("Margarita")


def test_find_swallows_network_errors(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("no network")

    monkeypatch.setattr(cocktaildb.requests, "get", boom)
    with pytest.raises(CocktailDBError):
        lookup_cocktail_image("Margarita")
    assert find_cocktail_image("Margarita") is None


def test_image_lookup_endpoint(client, fake_api):
    table, _ = fake_api
    table["Margarita"] = [{"strDrink": "Margarita", "strDrinkThumb": "https://img/margarita.jpg"}]

    resp = client.get("/images/lookup", params={"name": "Margarita"})
    assert resp.status_code == 200
    assert resp.json() == {"name": "Margarita", "image_url": "https://img/margarita.jpg"}

    assert client.get("/images/lookup", params={"name": "Unheard Of"}).status_code == 404


def test_image_lookup_endpoint_upstream_failure(client, monkeypatch):
    monkeypatch.setattr(cocktaildb.requests, "get", lambda *a, **kw: FakeResponse(status_code=500))
    assert client.get("/images/lookup", params={"name": "Margarita"}).status_code == 502
