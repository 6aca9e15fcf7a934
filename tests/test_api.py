"""Tests for the HTTP categorization endpoint."""

import pytest
from fastapi.testclient import TestClient

from helpers import completion
from expensewise.api.main import app, get_flow

AMAZON_COMPLETION = completion(
    cleanedName="Amazon",
    suggestedCategory="Shopping",
    suggestedSubcategory="Online Shopping",
    brandColor="#FF9900",
    brandLogoUrl="https://logo.clearbit.com/amazon.com",
    imageKeyword="Amazon",
    confidence="high",
)


@pytest.fixture
def client_for(make_flow):
    """Build a TestClient whose flow wraps a fake model."""

    def _client(**flow_kwargs):
        flow, model, _ = make_flow(**flow_kwargs)
        app.dependency_overrides[get_flow] = lambda: flow
        return TestClient(app, raise_server_exceptions=False), model

    yield _client
    app.dependency_overrides.clear()


class TestCategorizeEndpoint:
    """Tests for POST /api/categorize."""

    def test_success(self, client_for):
        client, model = client_for(text=AMAZON_COMPLETION)

        response = client.post("/api/categorize", json={"name": "AMZN*AB123CD456"})

        assert response.status_code == 200
        body = response.json()
        assert body["cleanedName"] == "Amazon"
        assert body["category"] == "Shopping"
        assert body["subcategory"] == "Online Shopping"
        assert body["logoUrl"] == "https://logo.clearbit.com/amazon.com"
        assert body["confidence"] == "high"
        assert len(model.prompts) == 1

    @pytest.mark.parametrize("payload", [{}, {"name": ""}, {"name": 42}, {"title": "x"}, ["x"]])
    def test_missing_name(self, client_for, payload):
        """Test that requests without a name never reach the model."""
        client, model = client_for(text=AMAZON_COMPLETION)

        response = client.post("/api/categorize", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Expense name is required"}
        assert model.prompts == []

    def test_body_must_be_json(self, client_for):
        client, _ = client_for(text=AMAZON_COMPLETION)

        response = client.post(
            "/api/categorize",
            content=b"name=Amazon",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Request body must be JSON"}

    def test_whitespace_name_is_a_validation_failure(self, client_for):
        client, _ = client_for(text=AMAZON_COMPLETION)

        response = client.post("/api/categorize", json={"name": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "Expense name cannot be empty"

    def test_malformed_completion(self, client_for):
        """Test that a model failure is relayed as a 400."""
        client, _ = client_for(text="I think this is Shopping")

        response = client.post("/api/categorize", json={"name": "AMZN*AB123CD456"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid response format from AI",
            "errorType": "MalformedResponseError",
        }

    def test_missing_key_is_a_server_error(self, client_for):
        client, _ = client_for(text=AMAZON_COMPLETION, api_key=None)

        response = client.post("/api/categorize", json={"name": "AMZN*AB123CD456"})

        assert response.status_code == 500
        assert response.json()["error"] == "Google AI API key not configured"

    def test_unexpected_error_is_hidden(self):
        """Test the generic 500 handler."""

        class BrokenFlow:
            async def categorize(self, raw_name, correlation_id=None):
                raise RuntimeError("secret internals")

        app.dependency_overrides[get_flow] = lambda: BrokenFlow()
        try:
            client = TestClient(app, raise_server_exceptions=False)
            response = client.post("/api/categorize", json={"name": "Amazon"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health(self):
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert "google_ai" in body["services"]
        assert "pixabay" in body["services"]
