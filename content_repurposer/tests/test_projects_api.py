"""
Projects API end to end (SQLite, fake AI gateway):
- POST /api/projects analyzes and stores; smartDetect pre-selects platforms
- POST /api/projects/{id}/generate reports per-platform outcomes
- review edits: PUT content, approve, regenerate
"""
import json
import uuid

import pytest

from repurposer.exceptions import RateLimited


def _answer(platform: str) -> str:
    return json.dumps({"title": f"{platform} title", "content": f"{platform} body", "hashtags": [f"#{platform}"]})


async def _create(client, **form) -> dict:
    data = {"name": "Launch", "contentType": "text", "content": "Our startup just shipped v2"}
    data.update(form)
    resp = await client.post("/api/projects", data=data)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_missing_user_header_is_401(client) -> None:
    resp = await client.get("/api/projects", headers={"X-User-ID": ""})
    assert resp.status_code == 401
    resp = await client.get("/api/projects", headers={"X-User-ID": "not-a-uuid"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_create_project_with_fallback_analysis(client) -> None:
    project = await _create(client)
    assert project["status"] == "draft"
    assert project["selected_platforms"] == []
    assert project["analysis"]["primaryCategory"] == "business"
    ids = [p["id"] for p in project["suggestedPlatforms"]]
    assert ids[:3] == ["linkedin", "twitter", "medium"]
    assert project["analysis_results"]["primaryCategory"] == "business"


@pytest.mark.asyncio
async def test_create_project_smart_detect_selects_top_three(client) -> None:
    project = await _create(client, smartDetect="true")
    assert project["selected_platforms"] == ["linkedin", "twitter", "medium"]
    project = await _create(client, smartDetect="false")
    assert project["selected_platforms"] == []


@pytest.mark.asyncio
async def test_create_project_uses_ai_analysis(client, fake_llm) -> None:
    fake_llm.replies["analysis"] = json.dumps(
        {
            "contentAnalysis": {"primaryCategory": "design"},
            "suggestedPlatforms": [{"id": "dribbble", "name": "Dribbble", "relevanceScore": 91}],
        }
    )
    project = await _create(client, content="Portfolio refresh", smartDetect="true")
    assert project["analysis"]["primaryCategory"] == "design"
    assert project["selected_platforms"] == ["dribbble"]


@pytest.mark.asyncio
async def test_create_project_requires_name(client) -> None:
    resp = await client.post("/api/projects", data={"name": "  ", "content": "x"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_create_project_with_files(client, storage) -> None:
    resp = await client.post(
        "/api/projects",
        data={"name": "With image", "contentType": "file", "content": "hiking trip"},
        files=[("files", ("trail.png", b"\x89PNG....", "image/png"))],
    )
    assert resp.status_code == 201, resp.text
    project = resp.json()
    assert project["analysis"]["contentType"] == "mixed"
    assert len(project["files"]) == 1
    stored = project["files"][0]
    assert stored["file_type"] == "image"
    assert stored["file_size"] == 8
    assert storage.path_for(stored["file_path"]).read_bytes() == b"\x89PNG...."

    detail = (await client.get(f"/api/projects/{project['id']}")).json()
    assert detail["fileSummary"]["hasImages"] is True
    assert detail["fileSummary"]["totalFiles"] == 1


@pytest.mark.asyncio
async def test_create_project_rejects_unsupported_file(client) -> None:
    resp = await client.post(
        "/api/projects",
        data={"name": "Bad file", "content": "x"},
        files=[("files", ("tool.exe", b"MZ", "application/x-msdownload"))],
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_generate_reports_per_platform_outcomes(client, fake_llm) -> None:
    project = await _create(client)
    fake_llm.replies.update(
        {
            "twitter": _answer("twitter"),
            "linkedin": RateLimited("Rate limit exceeded - using fallback analysis"),
        }
    )

    resp = await client.post(f"/api/projects/{project['id']}/generate", json={"platforms": ["twitter", "linkedin"]})

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["projectId"] == project["id"]
    assert body["status"] == "draft"
    assert (body["succeeded"], body["failed"]) == (1, 1)
    by_platform = {r["platform"]: r for r in body["results"]}
    assert by_platform["twitter"]["status"] == "complete"
    assert by_platform["linkedin"]["status"] == "error"

    detail = (await client.get(f"/api/projects/{project['id']}")).json()
    assert detail["status"] == "draft"
    assert len(detail["generatedContent"]) == 2


@pytest.mark.asyncio
async def test_generate_all_complete_moves_to_review(client, fake_llm) -> None:
    project = await _create(client)
    fake_llm.replies["youtube"] = _answer("youtube")
    resp = await client.post(f"/api/projects/{project['id']}/generate", json={"platforms": ["youtube"]})
    assert resp.json()["status"] == "review"


@pytest.mark.asyncio
async def test_generate_requires_platforms(client) -> None:
    project = await _create(client)
    resp = await client.post(f"/api/projects/{project['id']}/generate", json={"platforms": []})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_generate_unknown_project_is_404(client) -> None:
    resp = await client.post(f"/api/projects/{uuid.uuid4()}/generate", json={"platforms": ["twitter"]})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_projects_are_scoped_to_user(client) -> None:
    project = await _create(client)
    resp = await client.get(f"/api/projects/{project['id']}", headers={"X-User-ID": str(uuid.uuid4())})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_list_projects_filters_and_counts(client, fake_llm) -> None:
    first = await _create(client, name="Alpha launch")
    await _create(client, name="Beta notes")
    fake_llm.replies["twitter"] = _answer("twitter")
    await client.post(f"/api/projects/{first['id']}/generate", json={"platforms": ["twitter"]})

    body = (await client.get("/api/projects")).json()
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 2, "pages": 1}
    counts = {p["name"]: p["generated_content_count"] for p in body["projects"]}
    assert counts == {"Alpha launch": 1, "Beta notes": 0}

    body = (await client.get("/api/projects", params={"status": "review"})).json()
    assert [p["name"] for p in body["projects"]] == ["Alpha launch"]

    body = (await client.get("/api/projects", params={"search": "BETA"})).json()
    assert [p["name"] for p in body["projects"]] == ["Beta notes"]

    body = (await client.get("/api/projects", params={"status": "all", "limit": 1, "page": 2})).json()
    assert len(body["projects"]) == 1
    assert body["pagination"]["pages"] == 2


@pytest.mark.asyncio
async def test_edit_approve_and_regenerate(client, fake_llm) -> None:
    project = await _create(client)
    fake_llm.replies["linkedin"] = _answer("linkedin")
    body = (await client.post(f"/api/projects/{project['id']}/generate", json={"platforms": ["linkedin"]})).json()
    content_id = body["results"][0]["id"]

    resp = await client.put(f"/api/projects/content/{content_id}", json={"title": "Edited", "hashtags": ["#x"]})
    assert resp.status_code == 200, resp.text
    assert resp.json()["title"] == "Edited"
    assert resp.json()["content"] == "linkedin body"
    assert resp.json()["hashtags"] == ["#x"]

    resp = await client.post(f"/api/projects/content/{content_id}/approve", json={"approved": True})
    assert resp.json()["approved"] is True
    assert resp.json()["approved_at"] is not None
    resp = await client.post(f"/api/projects/content/{content_id}/approve", json={"approved": False})
    assert resp.json()["approved"] is False
    assert resp.json()["approved_at"] is None

    resp = await client.post(f"/api/projects/content/{content_id}/regenerate")
    assert resp.status_code == 200, resp.text
    assert resp.json()["results"][0]["id"] != content_id
    detail = (await client.get(f"/api/projects/{project['id']}")).json()
    assert len(detail["generatedContent"]) == 2


@pytest.mark.asyncio
async def test_edit_unknown_content_is_404(client) -> None:
    resp = await client.put(f"/api/projects/content/{uuid.uuid4()}", json={"title": "x"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_edit_rejects_blank_fields(client, fake_llm) -> None:
    project = await _create(client)
    fake_llm.replies["twitter"] = _answer("twitter")
    body = (await client.post(f"/api/projects/{project['id']}/generate", json={"platforms": ["twitter"]})).json()
    content_id = body["results"][0]["id"]

    for payload in ({"title": "  "}, {"content": ""}, {"hashtags": []}, {"hashtags": [" "]}):
        resp = await client.put(f"/api/projects/content/{content_id}", json=payload)
        assert resp.status_code == 400, payload

    detail = (await client.get(f"/api/projects/{project['id']}")).json()
    item = detail["generatedContent"][0]
    assert (item["title"], item["content"], item["hashtags"]) == ("twitter title", "twitter body", ["#twitter"])
