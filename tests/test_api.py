import pytest


def open_position(client, ticker="ABC", entry_price=100, **extra):
    body = {"ticker": ticker, "entry_price": entry_price, "timeframe": "short", **extra}
    return client.post("/positions", json=body)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Position Tracker API is running"


def test_empty_collections_are_not_errors(client):
    assert client.get("/positions").json() == []
    assert client.get("/watchlist").json() == []
    assert client.get("/predictions/history").json() == []

    response = client.get("/portfolio")
    assert response.status_code == 200
    assert response.json()["positions"] == []
    assert response.json()["summary"]["total_positions"] == 0


def test_open_position(client):
    response = open_position(client, ticker="abc", support_levels=[90, 97, 102])

    assert response.status_code == 201
    body = response.json()
    assert body["ticker"] == "ABC"
    assert body["status"] == "OPEN"
    assert body["current_price"] == 110.0
    assert body["stop_loss"] == 97
    assert body["pnl"] == pytest.approx(10.0)
    assert body["days_left"] is None


def test_open_position_validation(client):
    assert open_position(client, entry_price=-1).status_code == 400
    assert client.post("/positions", json={"ticker": "ABC"}).status_code == 400
    assert open_position(client, timeframe="decade").status_code == 400


def test_list_positions_filters_by_status(client):
    open_position(client, "ABC")
    open_position(client, "XYZ")
    client.post("/positions/XYZ/sell", json={"sell_price": 55})

    assert [p["ticker"] for p in client.get("/positions", params={"status": "open"}).json()] == ["ABC"]
    assert [p["ticker"] for p in client.get("/positions", params={"status": "CLOSED"}).json()] == ["XYZ"]
    assert client.get("/positions", params={"status": "pending"}).status_code == 400


def test_sell_position(client):
    open_position(client)
    response = client.post("/positions/abc/sell", json={"sell_price": 120})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "CLOSED"
    assert body["sell_price"] == 120.0
    assert body["pnl"] == pytest.approx(20.0)

    assert client.post("/positions/abc/sell", json={"sell_price": 125}).status_code == 404


def test_sell_requires_price(client):
    open_position(client)
    assert client.post("/positions/ABC/sell", json={}).status_code == 400


def test_patch_position(client):
    open_position(client)
    response = client.patch("/positions/ABC", json={"current_price": 90, "resistance_levels": [120, 105]})

    assert response.status_code == 200
    assert response.json()["pnl"] == pytest.approx(-10.0)
    assert response.json()["take_profit"] == 105

    assert client.patch("/positions/ABC", json={"status": "unknown"}).status_code == 400
    assert client.patch("/positions/NOPE", json={"current_price": 1}).status_code == 404


def test_patch_close_without_price_is_rejected(client, quotes):
    quotes.failing.add("ABC")
    open_position(client)

    assert client.patch("/positions/ABC", json={"status": "CLOSED"}).status_code == 400
    assert client.get("/positions", params={"status": "OPEN"}).json()[0]["ticker"] == "ABC"


def test_update_prices_reports_each_position(client, quotes):
    open_position(client, "ABC")
    open_position(client, "XYZ")
    quotes.failing.add("XYZ")

    response = client.post("/positions/update-prices")

    assert response.status_code == 200
    results = {r["ticker"]: r for r in response.json()}
    assert results["ABC"]["success"] is True
    assert results["XYZ"]["success"] is False


def test_refresh_single_price(client, quotes):
    open_position(client)
    quotes.prices["ABC"] = 130.0
    response = client.post("/positions/ABC/refresh-price")
    assert response.json()["current_price"] == 130.0
    assert response.json()["pnl"] == pytest.approx(30.0)


def test_delete_position(client):
    position_id = open_position(client).json()["id"]
    assert client.delete(f"/positions/{position_id}").status_code == 200
    assert client.delete(f"/positions/{position_id}").status_code == 404


def test_quote_proxy(client, quotes):
    response = client.get("/prices/abc")
    assert response.status_code == 200
    assert response.json() == {"ticker": "ABC", "price": 110.0, "change": 1.0, "change_percent": 0.5}
    assert client.get("/positions/current-price/XYZ").json()["price"] == 50.0

    quotes.failing.add("ABC")
    assert client.get("/prices/ABC").status_code == 502


def test_watchlist_flow(client):
    created = client.post("/watchlist", json={"ticker": "abc", "fundamental_score": 8})
    assert created.status_code == 201
    assert client.post("/watchlist", json={"ticker": "ABC", "fundamental_score": 5}).status_code == 400
    [stored] = client.get("/watchlist").json()
    assert stored["fundamental_score"] == 8.0

    assert client.get("/watchlist/pending/technical").json() == ["ABC"]
    client.patch("/watchlist/abc", json={"technical_score": 6})
    assert client.get("/watchlist/pending/technical").json() == []
    assert client.get("/watchlist/pending/news").json() == ["ABC"]
    assert client.get("/watchlist/pending/bogus").status_code == 400

    item = client.get("/watchlist/ABC").json()
    assert item["analysis_status"] == {"fundamental": True, "technical": True, "news": False}

    assert client.delete("/watchlist/ABC").json() == {"status": "ok", "ticker": "ABC"}
    assert client.get("/watchlist/ABC").status_code == 404


def test_predictions_flow(client):
    body = {
        "symbol": "abc",
        "target_date": "2025-04-01",
        "predictions": {"arima": {"price": 101.0, "change": 1.0}, "ensemble": {"price": 102.0, "change": 2.0}},
    }
    single = client.post("/predictions/receive", json=body)
    assert single.status_code == 201
    assert len(single.json()) == 1

    batch = client.post("/predictions/receive", json=[body, {**body, "symbol": "XYZ"}])
    assert batch.status_code == 201
    assert len(batch.json()) == 2

    latest = client.get("/predictions/ABC")
    assert latest.status_code == 200
    assert latest.json()["predictions"]["ensemble"]["price"] == 102.0

    assert client.get("/predictions/NOPE").status_code == 404
    assert len(client.get("/predictions/history", params={"symbol": "abc"}).json()) == 2


def test_performance(client):
    open_position(client, "ABC")
    client.post("/positions/ABC/sell", json={"sell_price": 96.8})

    body = client.get("/performance").json()
    assert body["total_trades"] == 1
    assert body["best_percentage_return"] == 0.0
    assert body["worst_percentage_return"] == pytest.approx(-3.2)


def test_performance_timeseries(client, index_cache):
    response = client.get("/performance/timeseries", params={"startDate": "2025-03-03", "endDate": "2025-03-06"})

    assert response.status_code == 200
    points = response.json()
    assert [p["date"] for p in points] == ["2025-03-03", "2025-03-04", "2025-03-05", "2025-03-06"]
    assert all(p["closed_trades"] == 0 for p in points)
    assert points[1]["benchmark_return"] == pytest.approx(2.0)
    assert index_cache.fetches == ["^GSPC"]

    inverted = client.get("/performance/timeseries", params={"startDate": "2025-03-06", "endDate": "2025-03-01"})
    assert inverted.status_code == 400
