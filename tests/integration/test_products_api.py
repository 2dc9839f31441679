def test_products_lists_catalogue(client):
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json() == [
        {"id": "product_1", "name": "Premium Coffee Beans", "price": 1500, "imageUrl": "/images/coffee.jpg"},
        {"id": "product_2", "name": "Handcrafted Mug", "price": 2500, "imageUrl": "/images/mug.jpg"},
    ]


def test_products_is_deterministic(client):
    assert client.get("/api/products").json() == client.get("/api/products").json()


def test_products_allows_cross_origin(client):
    r = client.get("/api/products", headers={"Origin": "http://localhost:3000"})
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"


def test_public_config(client):
    r = client.get("/api/config")
    assert r.status_code == 200
    assert r.json() == {"publishableKey": "pk_test_dummy", "currency": "aud"}


def test_health_reports_stripe_settings(client):
    body = client.get("/health").json()
    assert body["ok"] is True
    assert body["stripe"] == {"secret_key": True, "webhook_secret": True, "publishable_key": True}
    assert body["rate_limit"]["enabled"] is False
