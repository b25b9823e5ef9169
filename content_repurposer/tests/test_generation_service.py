"""
Per-platform generation fan-out:
- every platform gets exactly one row; a failing platform is stored as status=error
- project ends in review only when all platforms completed, otherwise draft
"""
import asyncio
import json
import uuid

import pytest
from sqlalchemy import event, select
from sqlalchemy.orm import Session

from repurposer.exceptions import RateLimited
from repurposer.models import GeneratedContent, Project
from repurposer.services.generation_service import (
    GENERATION_CANCELLED_MESSAGE,
    final_project_status,
    generate_for_platforms,
    regenerate_content,
)

from conftest import FakeLLM


def _answer(platform: str, **extra) -> str:
    return json.dumps({"title": f"{platform} title", "content": f"{platform} body", "hashtags": [f"#{platform}"], **extra})


async def _make_project(session_factory, user_id) -> uuid.UUID:
    async with session_factory() as db:
        project = Project(user_id=user_id, name="Launch post", original_content="We launched our product today.")
        db.add(project)
        await db.commit()
        return project.id


async def _project(session_factory, project_id) -> Project:
    async with session_factory() as db:
        return await db.get(Project, project_id)


async def _rows(session_factory, project_id):
    async with session_factory() as db:
        r = await db.execute(select(GeneratedContent).where(GeneratedContent.project_id == project_id))
        return list(r.scalars().all())


def test_final_project_status() -> None:
    assert final_project_status(3, 3) == "review"
    assert final_project_status(3, 2) == "draft"
    assert final_project_status(0, 0) == "draft"


@pytest.mark.asyncio
async def test_all_platforms_succeed(session_factory, user_id) -> None:
    project_id = await _make_project(session_factory, user_id)
    llm = FakeLLM({"twitter": _answer("twitter", tweetCount=5), "linkedin": _answer("linkedin")})

    batch = await generate_for_platforms(session_factory, llm, user_id, project_id, ["twitter", "linkedin"])

    assert batch.status == "review"
    assert (batch.succeeded, batch.failed) == (2, 0)
    assert [i.platform for i in batch.items] == ["twitter", "linkedin"]
    twitter = batch.items[0]
    assert twitter.status == "complete"
    assert twitter.title == "twitter title"
    assert twitter.extras == {"tweetCount": 5}

    project = await _project(session_factory, project_id)
    assert project.status == "review"
    assert project.selected_platforms == ["twitter", "linkedin"]
    assert len(await _rows(session_factory, project_id)) == 2


@pytest.mark.asyncio
async def test_one_platform_failure_is_isolated(session_factory, user_id) -> None:
    project_id = await _make_project(session_factory, user_id)
    llm = FakeLLM(
        {
            "twitter": _answer("twitter"),
            "linkedin": RateLimited("Rate limit exceeded - using fallback analysis"),
            "facebook": _answer("facebook"),
        }
    )

    batch = await generate_for_platforms(
        session_factory, llm, user_id, project_id, ["twitter", "linkedin", "facebook"]
    )

    assert batch.status == "draft"
    assert (batch.succeeded, batch.failed) == (2, 1)
    by_platform = {i.platform: i for i in batch.items}
    assert by_platform["twitter"].status == "complete"
    assert by_platform["facebook"].status == "complete"
    assert by_platform["linkedin"].status == "error"
    assert by_platform["linkedin"].error_message == "Rate limit exceeded - using fallback analysis"

    rows = await _rows(session_factory, project_id)
    assert sorted(r.status for r in rows) == ["complete", "complete", "error"]
    assert (await _project(session_factory, project_id)).status == "draft"


@pytest.mark.asyncio
async def test_prose_answer_still_completes_with_fallback(session_factory, user_id) -> None:
    project_id = await _make_project(session_factory, user_id)
    llm = FakeLLM({"instagram": "Sunny vibes only! Check out our launch."})

    batch = await generate_for_platforms(session_factory, llm, user_id, project_id, ["instagram"])

    item = batch.items[0]
    assert item.status == "complete"
    assert item.title == "Instagram Post"
    assert item.content == "Sunny vibes only! Check out our launch."
    assert item.hashtags == ["#instagram", "#content"]
    assert batch.status == "review"


@pytest.mark.asyncio
async def test_duplicate_platforms_are_collapsed(session_factory, user_id) -> None:
    project_id = await _make_project(session_factory, user_id)
    llm = FakeLLM({"twitter": _answer("twitter")})
    batch = await generate_for_platforms(session_factory, llm, user_id, project_id, ["twitter", "twitter"])
    assert len(batch.items) == 1
    assert len(llm.prompts) == 1


@pytest.mark.asyncio
async def test_prompt_carries_project_content(session_factory, user_id) -> None:
    project_id = await _make_project(session_factory, user_id)
    llm = FakeLLM({"tiktok": _answer("tiktok")})
    await generate_for_platforms(session_factory, llm, user_id, project_id, ["tiktok"])
    assert "We launched our product today." in llm.prompts[0]


@pytest.mark.asyncio
async def test_empty_platform_list_rejected(session_factory, user_id) -> None:
    project_id = await _make_project(session_factory, user_id)
    with pytest.raises(ValueError, match="platforms_required"):
        await generate_for_platforms(session_factory, FakeLLM(), user_id, project_id, [])


@pytest.mark.asyncio
async def test_other_users_project_not_found(session_factory, user_id) -> None:
    project_id = await _make_project(session_factory, user_id)
    with pytest.raises(ValueError, match="project_not_found"):
        await generate_for_platforms(session_factory, FakeLLM(), uuid.uuid4(), project_id, ["twitter"])


@pytest.mark.asyncio
async def test_regenerate_adds_a_new_row(session_factory, user_id) -> None:
    project_id = await _make_project(session_factory, user_id)
    llm = FakeLLM({"linkedin": RateLimited("Rate limit exceeded - using fallback analysis")})
    first = await generate_for_platforms(session_factory, llm, user_id, project_id, ["linkedin"])
    failed_id = first.items[0].id

    llm.replies["linkedin"] = _answer("linkedin")
    batch = await regenerate_content(session_factory, llm, user_id, failed_id)

    assert batch.items[0].id != failed_id
    assert batch.items[0].status == "complete"
    assert batch.status == "review"
    rows = await _rows(session_factory, project_id)
    assert sorted(r.status for r in rows) == ["complete", "error"]


@pytest.mark.asyncio
async def test_regenerate_unknown_content(session_factory, user_id) -> None:
    with pytest.raises(ValueError, match="content_not_found"):
        await regenerate_content(session_factory, FakeLLM(), user_id, uuid.uuid4())


class HangingLLM:
    """Never answers; signals once `expected` calls are in flight."""

    def __init__(self, expected: int) -> None:
        self.expected = expected
        self.calls = 0
        self.all_started = asyncio.Event()

    async def generate(self, prompt: str) -> str:
        self.calls += 1
        if self.calls >= self.expected:
            self.all_started.set()
        await asyncio.sleep(3600)
        return ""


@pytest.mark.asyncio
async def test_cancelled_batch_does_not_stay_generating(session_factory, user_id) -> None:
    project_id = await _make_project(session_factory, user_id)
    llm = HangingLLM(expected=2)

    task = asyncio.create_task(
        generate_for_platforms(session_factory, llm, user_id, project_id, ["twitter", "linkedin"])
    )
    await asyncio.wait_for(llm.all_started.wait(), timeout=10)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert (await _project(session_factory, project_id)).status == "draft"
    rows = await _rows(session_factory, project_id)
    assert sorted(r.platform for r in rows) == ["linkedin", "twitter"]
    assert [r.status for r in rows] == ["error", "error"]
    assert {r.error_message for r in rows} == {GENERATION_CANCELLED_MESSAGE}


@pytest.mark.asyncio
async def test_row_write_failure_propagates_and_keeps_siblings(session_factory, user_id) -> None:
    project_id = await _make_project(session_factory, user_id)
    llm = FakeLLM({"twitter": _answer("twitter"), "linkedin": _answer("linkedin")})

    def fail_linkedin_insert(session, flush_context, instances) -> None:
        if any(isinstance(o, GeneratedContent) and o.platform == "linkedin" for o in session.new):
            raise RuntimeError("disk I/O error")

    event.listen(Session, "before_flush", fail_linkedin_insert)
    try:
        with pytest.raises(RuntimeError, match="disk I/O error"):
            await generate_for_platforms(session_factory, llm, user_id, project_id, ["twitter", "linkedin"])
    finally:
        event.remove(Session, "before_flush", fail_linkedin_insert)

    rows = await _rows(session_factory, project_id)
    assert [(r.platform, r.status) for r in rows] == [("twitter", "complete")]
    assert (await _project(session_factory, project_id)).status == "draft"
