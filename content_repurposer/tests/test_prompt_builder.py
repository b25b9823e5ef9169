"""Prompt builder: pure functions over (content, platform, files)."""
from repurposer.schemas.analysis import FileMeta
from repurposer.services.prompt_builder import (
    PLATFORM_TEMPLATES,
    build_analysis_prompt,
    build_repurpose_prompt,
)


def test_repurpose_prompt_contains_template_and_content() -> None:
    prompt = build_repurpose_prompt("Our launch went great.", "linkedin")
    assert prompt.startswith(PLATFORM_TEMPLATES["linkedin"])
    assert prompt.endswith("Original content:\nOur launch went great.")


def test_unknown_platform_uses_twitter_template() -> None:
    prompt = build_repurpose_prompt("x", "myspace")
    assert prompt.startswith(PLATFORM_TEMPLATES["twitter"])


def test_repurpose_prompt_is_deterministic() -> None:
    files = [FileMeta(type="image", file_name="a.png", size=2048)]
    assert build_repurpose_prompt("c", "tiktok", files) == build_repurpose_prompt("c", "tiktok", files)


def test_repurpose_prompt_lists_files() -> None:
    files = [
        FileMeta(type="image", file_name="chart.png", size=2048),
        FileMeta(type="document", file_name=None, size=10),
    ]
    prompt = build_repurpose_prompt("c", "twitter", files)
    assert "Additional context from uploaded files:" in prompt
    assert "- IMAGE file: chart.png" in prompt
    assert "- DOCUMENT file: Unnamed" in prompt


def test_analysis_prompt_embeds_content_and_file_sizes() -> None:
    files = [FileMeta(type="image", file_name="chart.png", size=1536)]
    prompt = build_analysis_prompt("SaaS pricing lessons", files)
    assert "SaaS pricing lessons" in prompt
    assert 'IMAGE file: "chart.png" (2KB)' in prompt
    assert '"contentAnalysis"' in prompt


def test_analysis_prompt_without_files_has_no_file_section() -> None:
    assert "Attached Files Analysis" not in build_analysis_prompt("hello")
