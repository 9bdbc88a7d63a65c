"""Tests for the content endpoints (/help, /documentation, /videos, /careers, /blog)"""

import pytest


GUIDE = {
    "title": "My Great Guide!!",
    "description": "How to get going",
    "category": "getting-started",
    "content": "# Hello",
}


def test_help_article_lifecycle(client, clock, editor_headers):
    res = client.post("/api/cms/help", json=GUIDE, headers=editor_headers)
    assert res.status_code == 201, res.text
    created = res.json()
    assert created["id"] == "my-great-guide"
    assert created["published"] is False
    assert "docType" not in created

    clock.advance(minutes=1)
    res = client.put(
        "/api/cms/help",
        json={"id": "my-great-guide", "published": True},
        headers=editor_headers,
    )
    assert res.status_code == 200, res.text
    updated = res.json()
    assert updated["published"] is True
    assert updated["title"] == GUIDE["title"]
    assert updated["content"] == GUIDE["content"]
    assert updated["updatedAt"] > updated["createdAt"]

    res = client.get("/api/cms/help?id=my-great-guide&published=true")
    assert res.status_code == 200
    assert res.json()["id"] == "my-great-guide"

    res = client.delete("/api/cms/help?id=my-great-guide", headers=editor_headers)
    assert res.status_code == 200
    assert res.json() == {"success": True}

    res = client.delete("/api/cms/help?id=my-great-guide", headers=editor_headers)
    assert res.status_code == 404
    assert "error" in res.json()


def test_mutations_require_session(client):
    assert client.post("/api/cms/help", json=GUIDE).status_code == 401
    assert client.put("/api/cms/help", json={"id": "x"}).status_code == 401
    assert client.delete("/api/cms/help?id=x").status_code == 401


@pytest.mark.parametrize("path", ["/help", "/documentation", "/videos", "/careers", "/blog"])
def test_draft_reads_require_session(client, path):
    assert client.get(f"/api/cms{path}").status_code == 401
    assert client.get(f"/api/cms{path}?published=false").status_code == 401
    res = client.get(f"/api/cms{path}?published=true")
    assert res.status_code == 200
    assert res.json() == []


def test_anonymous_read_hides_drafts(client, editor_headers):
    client.post("/api/cms/help", json=GUIDE, headers=editor_headers)
    res = client.get("/api/cms/help?id=my-great-guide&published=true")
    assert res.status_code == 404


def test_missing_fields(client, editor_headers):
    res = client.post("/api/cms/help", json={"title": "Only title"}, headers=editor_headers)
    assert res.status_code == 400
    assert res.json()["error"].startswith("Missing required fields")


def test_body_must_be_object(client, editor_headers):
    res = client.post("/api/cms/help", json=["not", "an", "object"], headers=editor_headers)
    assert res.status_code == 400


def test_duplicate_title_conflicts(client, editor_headers):
    assert client.post("/api/cms/help", json=GUIDE, headers=editor_headers).status_code == 201
    res = client.post("/api/cms/help", json=GUIDE, headers=editor_headers)
    assert res.status_code == 409


def test_update_requires_id_and_existing(client, editor_headers):
    res = client.put("/api/cms/help", json={"published": True}, headers=editor_headers)
    assert res.status_code == 400
    res = client.put("/api/cms/help", json={"id": "ghost", "published": True}, headers=editor_headers)
    assert res.status_code == 404


def test_delete_requires_id(client, editor_headers):
    assert client.delete("/api/cms/help", headers=editor_headers).status_code == 400


def test_help_sorted_newest_first(client, clock, editor_headers):
    for title in ("First", "Second", "Third"):
        client.post("/api/cms/help", json=dict(GUIDE, title=title), headers=editor_headers)
        clock.advance(minutes=1)
    client.put("/api/cms/help", json={"id": "first", "content": "edited"}, headers=editor_headers)

    res = client.get("/api/cms/help", headers=editor_headers)
    assert [a["id"] for a in res.json()] == ["first", "third", "second"]


def test_help_category_filter(client, editor_headers):
    client.post("/api/cms/help", json=GUIDE, headers=editor_headers)
    client.post("/api/cms/help", json=dict(GUIDE, title="Invoices", category="billing"), headers=editor_headers)

    res = client.get("/api/cms/help?category=billing", headers=editor_headers)
    assert [a["id"] for a in res.json()] == ["invoices"]


def test_documentation_sorted_by_order(client, clock, editor_headers):
    base = {"description": "d", "section": "api", "content": "c"}
    client.post("/api/cms/documentation", json=dict(base, title="Later", order=2), headers=editor_headers)
    clock.advance(minutes=1)
    client.post("/api/cms/documentation", json=dict(base, title="Intro", order=1), headers=editor_headers)
    clock.advance(minutes=1)
    client.post("/api/cms/documentation", json=dict(base, title="Also Intro", order=1), headers=editor_headers)
    client.post(
        "/api/cms/documentation",
        json=dict(base, title="Elsewhere", section="user-guide"),
        headers=editor_headers,
    )

    res = client.get("/api/cms/documentation?section=api", headers=editor_headers)
    assert [d["id"] for d in res.json()] == ["also-intro", "intro", "later"]


def test_video_create(client, editor_headers):
    res = client.post(
        "/api/cms/videos",
        json={"title": "Demo Tour", "description": "d", "url": "https://cdn/v.mp4", "category": "intro", "duration": "3:12"},
        headers=editor_headers,
    )
    assert res.status_code == 201, res.text
    assert res.json()["duration"] == "3:12"


def test_careers_filters(client, editor_headers):
    job = {
        "description": "d",
        "responsibilities": "r",
        "qualifications": "q",
        "location": "Remote",
        "published": True,
    }
    client.post(
        "/api/cms/careers",
        json=dict(job, title="Backend Engineer", department="Engineering", type="Full-time"),
        headers=editor_headers,
    )
    client.post(
        "/api/cms/careers",
        json=dict(job, title="Design Intern", department="Design", type="Internship"),
        headers=editor_headers,
    )

    res = client.get("/api/cms/careers?published=true&type=Internship")
    assert [c["id"] for c in res.json()] == ["design-intern"]
    res = client.get("/api/cms/careers?published=true&department=Engineering&location=Remote")
    assert [c["id"] for c in res.json()] == ["backend-engineer"]


def test_blog_uses_slug(client, editor_headers):
    post = {"title": "Ontology 101", "description": "d", "content": "c", "tags": ["ai"], "published": True}
    res = client.post("/api/cms/blog", json=post, headers=editor_headers)
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["slug"] == "ontology-101"
    assert body["author"] == "Ledger1 Team"
    assert body["date"] == "2025-01-15"

    assert client.get("/api/cms/blog?slug=ontology-101&published=true").json()["slug"] == "ontology-101"

    res = client.put("/api/cms/blog", json={"slug": "ontology-101", "author": "Jane"}, headers=editor_headers)
    assert res.status_code == 200
    assert res.json()["author"] == "Jane"
    assert res.json()["slug"] == "ontology-101"

    res = client.delete("/api/cms/blog?slug=ontology-101", headers=editor_headers)
    assert res.status_code == 200
    assert client.delete("/api/cms/blog?slug=ontology-101", headers=editor_headers).status_code == 404


def test_blog_tag_filter_and_date_order(client, editor_headers):
    base = {"description": "d", "content": "c", "published": True}
    client.post("/api/cms/blog", json=dict(base, title="Old", date="2024-05-01", tags=["ai"]), headers=editor_headers)
    client.post("/api/cms/blog", json=dict(base, title="New", date="2025-01-01", tags=["ai", "news"]), headers=editor_headers)
    client.post("/api/cms/blog", json=dict(base, title="Other", date="2025-02-01", tags=["news"]), headers=editor_headers)

    res = client.get("/api/cms/blog?published=true&tag=ai")
    assert [p["slug"] for p in res.json()] == ["new", "old"]
    res = client.get("/api/cms/blog?published=true")
    assert [p["slug"] for p in res.json()] == ["other", "new", "old"]
