# tests/test_api_calculator.py
def test_roi_success(client):
    payload = {
        "nightlyRate": 150,
        "nightsBookedPerMonth": 20,
        "cleaningFeePerStay": 80,
        "staysPerMonth": 10,
        "monthlyFixedCosts": 2500,
        "purchasePrice": 400000,
    }
    r = client.post("/api/calculator/roi", json=payload)
    assert r.status_code == 200, r.text
    assert r.json() == {
        "monthlyRevenue": 3800.0,
        "monthlyCosts": 2500.0,
        "monthlyProfit": 1300.0,
        "annualProfit": 15600.0,
        "capRatePercent": 3.9,
    }


def test_roi_unbooked_listing(client):
    payload = {
        "nightlyRate": 0,
        "nightsBookedPerMonth": 0,
        "cleaningFeePerStay": 0,
        "staysPerMonth": 0,
        "monthlyFixedCosts": 1000,
        "purchasePrice": 300000,
    }
    r = client.post("/api/calculator/roi", json=payload)
    assert r.status_code == 200, r.text
    assert r.json() == {
        "monthlyRevenue": 0.0,
        "monthlyCosts": 1000.0,
        "monthlyProfit": -1000.0,
        "annualProfit": -12000.0,
        "capRatePercent": -4.0,
    }


def test_roi_invalid_price_returns_problem(client):
    r = client.post("/api/calculator/roi", json={"nightlyRate": 150, "purchasePrice": 0})
    assert r.status_code == 400
    body = r.json()
    assert body["title"] == "Validation Error"
    assert body["status"] == 400
    assert "PurchasePrice" in body["detail"]
    assert body["errors"] == {"PurchasePrice": ["PurchasePrice must be greater than zero."]}


def test_roi_type_error_returns_problem(client):
    r = client.post("/api/calculator/roi", json={"nightlyRate": "lots", "purchasePrice": 100000})
    assert r.status_code == 400
    body = r.json()
    assert body["title"] == "Validation Error"
    assert "nightlyRate" in body["errors"]
