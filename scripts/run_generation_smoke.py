"""
Generation smoke run: create a project, generate for several platforms, export JSON, validate records.
Uses an existing user id (env USER_ID or first argument). Server must be running at API_BASE_URL
(default http://localhost:8000).

  USER_ID=<uuid> python run_generation_smoke.py
  python run_generation_smoke.py <user_id> [platform ...]

Writes smoke_project.json and smoke_generation.json next to this script.
"""
import json
import os
import sys
import urllib.error
import urllib.parse
import urllib.request

BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000")
OUT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_OUT = os.path.join(OUT_DIR, "smoke_project.json")
GENERATION_OUT = os.path.join(OUT_DIR, "smoke_generation.json")
DEFAULT_PLATFORMS = ["twitter", "linkedin", "instagram"]
SAMPLE_CONTENT = (
    "We rebuilt our onboarding flow and cut time-to-first-value from 3 days to 40 minutes. "
    "Three changes mattered most: a guided checklist, sample data, and a 2-minute setup video."
)


def request(user_id: str, method: str, path: str, body: dict | None = None, form: dict | None = None) -> dict:
    req = urllib.request.Request(BASE_URL + path, method=method)
    req.add_header("X-User-ID", user_id)
    data = None
    if form is not None:
        data = urllib.parse.urlencode(form).encode("utf-8")
        req.add_header("Content-Type", "application/x-www-form-urlencoded")
    elif body is not None:
        data = json.dumps(body).encode("utf-8")
        req.add_header("Content-Type", "application/json")
    try:
        with urllib.request.urlopen(req, data=data, timeout=300) as resp:
            return json.loads(resp.read().decode("utf-8"))
    except urllib.error.HTTPError as e:
        raw = e.read().decode("utf-8")
        try:
            detail = json.loads(raw).get("detail", raw)
        except ValueError:
            detail = raw
        raise SystemExit(f"HTTP {e.code}: {detail}")
    except urllib.error.URLError as e:
        raise SystemExit(f"Request failed: {e.reason}")


def validate_item(item: dict) -> list[str]:
    """Problems with one generated record; empty when it is usable."""
    platform = item.get("platform")
    if item.get("status") == "error":
        return [f"[{platform}] error: {item.get('error_message')}"]
    problems = []
    if not (item.get("title") or "").strip():
        problems.append(f"[{platform}] empty title")
    if not (item.get("content") or "").strip():
        problems.append(f"[{platform}] empty content")
    if not item.get("hashtags"):
        problems.append(f"[{platform}] no hashtags")
    return problems


def main() -> None:
    args = sys.argv[1:]
    user_id = os.environ.get("USER_ID") or (args.pop(0) if args else None)
    if not user_id:
        print("Usage: USER_ID=<uuid> python run_generation_smoke.py [platform ...]")
        print("   or: python run_generation_smoke.py <user_id> [platform ...]")
        sys.exit(1)
    platforms = args or DEFAULT_PLATFORMS

    print("=== Generation Smoke Run ===")
    print(f"Base URL: {BASE_URL}")
    print(f"User ID: {user_id}")
    print(f"Platforms: {', '.join(platforms)}")
    print()

    print("1) POST /api/projects")
    project = request(
        user_id,
        "POST",
        "/api/projects",
        form={"name": "Smoke run", "contentType": "text", "content": SAMPLE_CONTENT},
    )
    with open(PROJECT_OUT, "w", encoding="utf-8") as f:
        json.dump(project, f, ensure_ascii=False, indent=2)
    print(f"   Saved: {PROJECT_OUT}")

    print(f"2) POST /api/projects/{project['id']}/generate")
    generation = request(user_id, "POST", f"/api/projects/{project['id']}/generate", body={"platforms": platforms})
    with open(GENERATION_OUT, "w", encoding="utf-8") as f:
        json.dump(generation, f, ensure_ascii=False, indent=2)
    print(f"   Saved: {GENERATION_OUT}")
    print()

    print("---- ANALYSIS ----")
    analysis = project.get("analysis") or {}
    print(f"primaryCategory: {analysis.get('primaryCategory')}")
    print(f"top platforms: {[p.get('id') for p in (project.get('suggestedPlatforms') or [])[:5]]}")
    print()
    print("---- GENERATION ----")
    print(f"status: {generation.get('status')}")
    print(f"succeeded: {generation.get('succeeded')}  failed: {generation.get('failed')}")

    errors = []
    for item in generation.get("results") or []:
        errors.extend(validate_item(item))
    if errors:
        print("---- VALIDATION ERRORS ----")
        for e in errors:
            print(f"  - {e}")
        sys.exit(2)
    print("---- VALIDATION ---- OK (title, content, hashtags on every platform)")


if __name__ == "__main__":
    main()
