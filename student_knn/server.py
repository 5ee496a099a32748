"""
FastAPI app serving single-point final-score predictions.

The app wraps an already fitted KNNRegressor. The regressor's reference store
is read-only, so requests share it without locking.
"""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from .config import Settings
from .knn import KNNError, KNNRegressor

logger = logging.getLogger(__name__)


class PredictRequest(BaseModel):
    attendance: float
    homework: float
    testscore: float
    k: Optional[int] = None

    def features(self):
        return [self.attendance, self.homework, self.testscore]


class PredictResponse(BaseModel):
    predicted: float


HTML_PAGE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Student performance forecast</title>
<style>
body { font-family: Arial; background: #f8f9fa; margin: 50px; }
.container { max-width: 400px; background: #fff; padding: 20px; border-radius: 10px; box-shadow: 0 0 10px rgba(0,0,0,0.1); }
input { width: 100%; padding: 8px; margin: 5px 0; border: 1px solid #ccc; border-radius: 5px; }
button { background: #007bff; color: white; border: none; padding: 10px; border-radius: 5px; cursor: pointer; width: 100%; }
button:hover { background: #0056b3; }
h2 { text-align: center; }
</style>
</head>
<body>
<div class="container">
<h2>Final score forecast</h2>
<label>Attendance (%)</label>
<input id="attendance" type="number" value="90" min="0" max="100">
<label>Homework (%)</label>
<input id="homework" type="number" value="85" min="0" max="100">
<label>Test score (%)</label>
<input id="testscore" type="number" value="80" min="0" max="100">
<button onclick="predict()">Predict</button>
<h3 id="result"></h3>
</div>
<script>
async function predict() {
  const data = {
    attendance: parseFloat(document.getElementById('attendance').value),
    homework: parseFloat(document.getElementById('homework').value),
    testscore: parseFloat(document.getElementById('testscore').value)
  };
  const res = await fetch('/', {
    method: 'POST',
    headers: {'Content-Type': 'application/json'},
    body: JSON.stringify(data)
  });
  const result = document.getElementById('result');
  if (!res.ok) {
    result.innerText = "Invalid input";
    return;
  }
  const json = await res.json();
  result.innerText = "Forecast: " + json.predicted.toFixed(2);
}
</script>
</body>
</html>
"""


def create_app(regressor: KNNRegressor, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the HTTP app around a fitted regressor.

    Args:
        regressor: KNNRegressor whose store was built from the training split
        settings: Used for the default k; defaults to Settings()

    Returns:
        FastAPI application
    """
    settings = settings or Settings()
    default_k = settings.k

    app = FastAPI(
        title="Student performance predictor",
        description="k-NN regression over attendance, homework and test scores",
        version="1.0.0"
    )

    def _predict(request: PredictRequest) -> PredictResponse:
        k = request.k if request.k is not None else default_k
        try:
            value = regressor.predict_one(request.features(), k=k)
        except KNNError as e:
            logger.warning(f"Rejected prediction request: {e}")
            raise HTTPException(status_code=400, detail="invalid input")
        logger.debug(f"Predicted {value:.2f} for {request.features()} (k={k})")
        return PredictResponse(predicted=value)

    @app.get("/", response_class=HTMLResponse)
    def index():
        return HTML_PAGE

    @app.post("/", response_model=PredictResponse)
    def predict_form(request: PredictRequest):
        return _predict(request)

    @app.post("/predict", response_model=PredictResponse)
    def predict(request: PredictRequest):
        return _predict(request)

    @app.get("/health")
    def health():
        store = regressor.store
        return {
            "status": "ok",
            "reference_size": 0 if store is None else len(store),
            "n_features": None if store is None else store.n_features,
            "default_k": default_k,
        }

    return app
