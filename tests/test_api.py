"""
API Tests

End-to-end through FastAPI's TestClient with auth disabled (dev user) and
stub collaborators injected via dependency overrides.
"""

import pytest
from fastapi.testclient import TestClient

from api.analyze import app
from api.dependencies import get_insight_generator, get_metrics_provider
from marketscope.database.models import CompetitiveAnalysisRecord

from conftest import StubInsightGenerator, StubMetricsProvider, failing_generator


@pytest.fixture
def stubs():
    return {"metrics": StubMetricsProvider(domain_authority=72), "generator": StubInsightGenerator()}


@pytest.fixture
def client(engine, stubs):
    app.dependency_overrides[get_metrics_provider] = lambda: stubs["metrics"]
    app.dependency_overrides[get_insight_generator] = lambda: stubs["generator"]
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def with_company(client):
    response = client.post("/api/company", json={
        "name": "Northwind",
        "industry": "SaaS",
        "website": "https://www.northwind.example/",
    })
    assert response.status_code == 200
    return response.json()


def add_competitor(client, name, website=None) -> dict:
    response = client.post("/api/competitors", json={"name": name, "website": website})
    assert response.status_code == 200
    return response.json()


# =============================================================================
# HEALTH & COMPANY
# =============================================================================

class TestHealthAndCompany:

    def test_root(self, client):
        assert client.get("/").json()["status"] == "ok"

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    def test_company_null_before_creation(self, client):
        response = client.get("/api/company")
        assert response.status_code == 200
        assert response.json() is None

    def test_create_requires_name(self, client):
        response = client.post("/api/company", json={"industry": "SaaS"})
        assert response.status_code == 400

    def test_create_then_partial_update(self, client, with_company):
        assert with_company["domain"] == "northwind.example"

        response = client.post("/api/company", json={"description": "CRM for agencies"})

        body = response.json()
        assert body["id"] == with_company["id"]
        assert body["name"] == "Northwind"
        assert body["description"] == "CRM for agencies"

    def test_competitors_need_company(self, client):
        assert client.get("/api/competitors").status_code == 404


# =============================================================================
# COMPETITORS & ANALYSES
# =============================================================================

class TestCompetitiveAnalysis:

    def test_competitor_crud(self, client, with_company):
        acme = add_competitor(client, "Acme", "acme.com")
        assert [c["name"] for c in client.get("/api/competitors").json()] == ["Acme"]

        assert client.delete(f"/api/competitors/{acme['id']}").json() == {"success": True}
        assert client.get("/api/competitors").json() == []
        assert client.delete(f"/api/competitors/{acme['id']}").status_code == 404

    def test_run_single_analysis(self, client, with_company, stubs):
        acme = add_competitor(client, "Acme", "acme.com")

        response = client.post("/api/competitive-analyses", json={"competitor_id": acme["id"]})

        assert response.status_code == 200
        body = response.json()
        assert body["seo_strength"] == "Very Strong"
        assert body["domain_authority"] == 72
        assert body["top_keywords"] == []
        assert len(client.get("/api/competitive-analyses").json()) == 1

    def test_unknown_competitor_404(self, client, with_company):
        response = client.post("/api/competitive-analyses", json={"competitor_id": 999})
        assert response.status_code == 404

    def test_no_website_400(self, client, with_company):
        bare = add_competitor(client, "Offline Ltd")
        response = client.post("/api/competitive-analyses", json={"competitor_id": bare["id"]})
        assert response.status_code == 400
        assert "website" in response.json()["detail"]

    def test_generation_failure_502_nothing_saved(self, client, with_company, stubs, db):
        stubs["generator"] = failing_generator("analyze_competitor")
        acme = add_competitor(client, "Acme", "acme.com")

        response = client.post("/api/competitive-analyses", json={"competitor_id": acme["id"]})

        assert response.status_code == 502
        assert db.query(CompetitiveAnalysisRecord).count() == 0

    def test_analyze_all_skips_failures(self, client, with_company, stubs):
        stubs["metrics"] = StubMetricsProvider(fail_on={2})
        for name in ("Acme", "Globex", "Initech"):
            add_competitor(client, name, f"{name.lower()}.com")

        response = client.post("/api/competitive-analyses/analyze-all")

        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_deleting_competitor_removes_analyses(self, client, with_company):
        acme = add_competitor(client, "Acme", "acme.com")
        client.post("/api/competitive-analyses", json={"competitor_id": acme["id"]})

        client.delete(f"/api/competitors/{acme['id']}")

        assert client.get("/api/competitive-analyses").json() == []


# =============================================================================
# LANDSCAPE & POSITIONING
# =============================================================================

class TestLandscapeAndPositioning:

    def test_landscape_needs_competitors(self, client, with_company):
        response = client.post("/api/competitive-landscape-analysis")
        assert response.status_code == 400
        assert "competitors" in response.json()["detail"]

    def test_landscape_run_then_read_latest(self, client, with_company):
        assert client.get("/api/competitive-landscape-analysis").json() is None
        add_competitor(client, "Acme", "acme.com")

        posted = client.post("/api/competitive-landscape-analysis").json()
        latest = client.get("/api/competitive-landscape-analysis").json()

        assert posted["summary"] == "Crowded mid-market"
        assert latest["summary"] == "Crowded mid-market"
        assert latest["recommendations"][0]["id"] == "rec-1"
        assert latest["created_at"] is not None

    def test_positioning_get_and_post_generate(self, client, with_company, stubs):
        first = client.get("/api/positioning-analysis").json()
        second = client.post("/api/positioning-analysis").json()

        assert first == second
        assert first["current_positioning"]["overview"] == "Friendly all-rounder"
        calls = [c for c in stubs["generator"].calls if c[0] == "analyze_positioning"]
        assert len(calls) == 2

    def test_positioning_recommendations_replaced(self, client, with_company):
        client.post("/api/positioning-recommendations", json={"recommendations": [
            {"title": "Agency specialist", "confidence": 3},
            {"title": "Fastest setup"},
        ]})
        client.post("/api/positioning-recommendations", json={"recommendations": [
            {"id": "keep", "title": "Agency specialist"},
        ]})

        saved = client.get("/api/positioning-recommendations").json()["recommendations"]

        assert len(saved) == 1
        assert saved[0]["id"] == "keep"
        assert saved[0]["confidence"] == 0.7


# =============================================================================
# BLOG IDEAS & ARTICLES
# =============================================================================

class TestBlogIdeasAndArticles:

    def test_generate_ideas(self, client, with_company):
        ideas = client.post("/api/blog-ideas").json()["ideas"]
        assert len(ideas) == 5
        assert ideas[0]["id"] == "idea-1"

    def test_rejected_idea_fed_back(self, client, with_company, stubs):
        rejected = client.post("/api/blog-ideas/reject", json={
            "idea": {"title": "CRM basics", "seoScore": 40},
            "reason": "Too generic",
        })
        assert rejected.status_code == 200
        assert rejected.json()["idea_data"]["seo_score"] == 40

        client.get("/api/blog-ideas")

        history = client.get("/api/blog-ideas/rejected").json()
        assert history[0]["rejection_reason"] == "Too generic"
        _, args, _ = stubs["generator"].calls[-1]
        assert args[3] == [{"title": "CRM basics", "reason": "Too generic"}]

    def test_reject_requires_title(self, client, with_company):
        response = client.post("/api/blog-ideas/reject", json={"idea": {"description": "x"}})
        assert response.status_code == 400

    def test_generate_article(self, client, with_company):
        response = client.post("/api/generate-article", json={"idea": {"title": "How agencies pick a CRM"}})

        assert response.status_code == 200
        body = response.json()
        assert body["word_count"] > 0
        assert body["keywords"] == ["crm", "agencies"]


# =============================================================================
# CONTENT
# =============================================================================

class TestContent:

    def test_content_lifecycle(self, client, with_company):
        created = client.post("/api/content", json={
            "title": "Launch post",
            "type": "blog",
            "content": "We are launching today",
        }).json()
        assert created["status"] == "draft"
        assert created["word_count"] == 4
        assert created["published_at"] is None

        updated = client.patch(f"/api/content/{created['id']}", json={"status": "published"}).json()
        assert updated["status"] == "published"
        assert updated["published_at"] is not None

        assert client.delete(f"/api/content/{created['id']}").json() == {"success": True}
        assert client.get("/api/content").json() == []

    def test_update_missing_item(self, client, with_company):
        assert client.patch("/api/content/404", json={"title": "x"}).status_code == 404

    def test_invalid_status_rejected(self, client, with_company):
        response = client.post("/api/content", json={"title": "x", "type": "blog", "status": "archived"})
        assert response.status_code == 422

    def test_generate_content_camel_case(self, client):
        response = client.post("/api/content/generate", json={
            "topic": "Launch",
            "contentType": "email",
            "wordCount": "200",
        })
        assert response.status_code == 200
        assert response.json() == {"content": "Short launch announcement copy."}

    def test_content_strategy(self, client, with_company):
        generated = client.post("/api/content-strategy/generate").json()
        listed = client.get("/api/content-strategy").json()

        assert generated["title"] == "Agency-first content plan"
        assert [s["id"] for s in listed] == [generated["id"]]


# =============================================================================
# JOBS
# =============================================================================

class TestJobs:

    def test_landscape_job_runs_in_background(self, client, with_company):
        add_competitor(client, "Acme", "acme.com")

        submitted = client.post("/api/jobs", json={"kind": "landscape"})
        assert submitted.status_code == 202
        assert submitted.json()["status"] == "pending"

        job = client.get(f"/api/jobs/{submitted.json()['id']}").json()
        assert job["status"] == "succeeded"
        assert job["result"]["summary"] == "Crowded mid-market"
        assert job["completed_at"] is not None

    def test_failed_job_records_message(self, client, with_company):
        submitted = client.post("/api/jobs", json={"kind": "landscape"}).json()

        job = client.get(f"/api/jobs/{submitted['id']}").json()

        assert job["status"] == "failed"
        assert "competitors" in job["error_message"]

    def test_competitor_job_validated_up_front(self, client, with_company):
        assert client.post("/api/jobs", json={"kind": "competitor"}).status_code == 400
        assert client.post("/api/jobs", json={"kind": "competitor", "competitor_id": 999}).status_code == 404

    def test_unknown_job(self, client, with_company):
        assert client.get("/api/jobs/12345").status_code == 404
