"""
Integration tests for the prediction HTTP endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from student_knn.config import Settings
from student_knn.knn import KNNRegressor, ReferenceStore
from student_knn.server import create_app


@pytest.fixture
def client():
    store = ReferenceStore.from_points([
        ((90, 80, 70), 82.0),
        ((60, 60, 60), 60.0),
        ((95, 90, 85), 91.0),
    ])
    app = create_app(KNNRegressor(store=store), Settings(k=2))
    return TestClient(app)


def test_index_serves_form(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert 'id="attendance"' in response.text


def test_predict_root(client):
    response = client.post("/", json={"attendance": 92, "homework": 85, "testscore": 80})
    assert response.status_code == 200
    assert response.json()["predicted"] == pytest.approx(86.5)


def test_predict_endpoint_with_k(client):
    response = client.post("/predict", json={"attendance": 92, "homework": 85, "testscore": 80, "k": 10})
    assert response.status_code == 200
    assert response.json()["predicted"] == pytest.approx((82.0 + 60.0 + 91.0) / 3)


def test_invalid_k_is_bad_request(client):
    response = client.post("/predict", json={"attendance": 92, "homework": 85, "testscore": 80, "k": 0})
    assert response.status_code == 400
    assert response.json()["detail"] == "invalid input"


def test_unparseable_body(client):
    response = client.post("/", json={"attendance": "lots", "homework": 85, "testscore": 80})
    assert response.status_code == 422


def test_empty_store_is_bad_request():
    app = create_app(KNNRegressor())
    response = TestClient(app).post("/predict", json={"attendance": 1, "homework": 2, "testscore": 3})
    assert response.status_code == 400


def test_health(client):
    data = client.get("/health").json()
    assert data == {"status": "ok", "reference_size": 3, "n_features": 3, "default_k": 2}


@pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_feature_is_bad_request(client, value):
    body = f'{{"attendance": {value}, "homework": 85, "testscore": 80}}'
    response = client.post("/predict", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json()["detail"] == "invalid input"
