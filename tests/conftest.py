"""
Pytest configuration and shared fixtures.

Provides a complete temporary agent workspace (registry, projects, feeds,
inboxes, status documents, outboxes, ideas), a config pointing at it and
an Aggregator with a fixed clock and probes disabled.

Workspace layout built by the `workspace` fixture:

    tmp/workspace/                    ceo agent + shared org/ directory
    tmp/workspace/org/projects.json   Launch Site, Shop, Legacy, Ghost
    tmp/workspace/org/feed/*.md       engineering and content feeds
    tmp/workspace-engineering/        STATUS.md, outbox.md, inbox/
    tmp/workspace-content/            outbox.md, tweet-log.md
    tmp/workspace-research/           findings/
    tmp/projects/<slug>/              project directories (ghost is missing)
"""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from constellation.core.aggregator import Aggregator
from constellation.core.config import ConstellationConfig, ProbeConfig, clear_cache

# Fixed "now" used by every aggregator test
NOW = datetime(2026, 1, 23, 12, 0, tzinfo=timezone.utc)

CONSTELLATION_ENV_VARS = [
    "CONSTELLATION_WORKSPACE",
    "CONSTELLATION_REGISTRY",
    "CONSTELLATION_STALE_DAYS",
    "CONSTELLATION_FEED_LIMIT",
    "CONSTELLATION_PROBES_ENABLED",
    "CONSTELLATION_PORT",
]


def write(path: Path, content: str) -> Path:
    """Write a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# ==============================================================================
# Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real user config and env overrides."""
    for name in CONSTELLATION_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Sample workspace
# ==============================================================================

LAUNCH_STATE = {
    "phase": "build",
    "lastUpdated": "2026-01-22T09:00:00Z",
    "tasks": [
        {"id": "T1", "title": "Landing copy", "type": "content", "status": "done",
         "milestone": "M1"},
        {"id": "T2", "title": "Competitor scan", "type": "research",
         "status": "in-progress"},
        {"id": 3, "title": "Deploy", "type": "infra", "status": "pending"},
    ],
    "activity": [
        {"message": "T1 completed", "type": "task", "time": "2026-01-22T09:00:00Z"},
        {"message": "Kickoff", "type": "note", "time": "2026-01-20T08:00:00Z"},
    ],
}

SHOP_STATE = {
    "lastUpdated": "2026-01-10T12:00:00Z",
    "tasks": [
        {"id": "T7", "title": "Checkout", "type": "marketing", "status": "failed"},
        {"id": "T8", "title": "Cart", "type": "Analysis", "status": "done"},
    ],
    "activity": [
        {"message": "T7 failed", "type": "task", "time": "2026-01-10T12:00:00Z"},
        {"message": "Undated", "type": "note"},
    ],
}

ENGINEERING_FEED = """# Engineering feed
**[9:05]** Picked up pricing page
**[2026-01-23 10:30]** Waiting on API keys from ops
**[2026-01-20 08:00]** Old deploy
Some note that is not an entry
**[11:45]** Shipped pricing page
"""

ENGINEERING_STATUS = """# Engineering Status
**Last Updated:** 2026-01-23 09:00

## 🎯 Current Focus
Checkout rewrite

## Currently Working On (2)
- Payment form validation
- [ ] Receipt templates

## Blocked On
- Nothing blocked

## Next Up
- Receipt emails

## Recently Completed
1. Cart persistence
2. Price rounding

## Metrics
| Metric | Value |
|---|---|
| Deploys | 4 |

## Empty

"""

GLOBAL_IDEAS = """# Ideas
- [ ] **Podcast** — weekly show #project:shop
- [ ] **Partner API** #blocked:legal-review
- [ ] **Both** #blocked:x #done:2026-01-05
- [ ] Plain idea
"""


@pytest.fixture
def workspace(tmp_path) -> Path:
    """Build the sample workspace and return the ceo workspace root."""
    root = tmp_path / "workspace"
    projects_dir = tmp_path / "projects"

    # Projects
    launch = projects_dir / "launch-site"
    write(launch / "state.json", json.dumps(LAUNCH_STATE))
    write(launch / "TASKS.md", "- [x] Copy\n- [x] Design\n- [ ] Deploy\n")
    write(launch / "PRD.md", "# Launch Site\n")
    write(launch / "progress.txt", "Started\nCopy approved\n\n")
    write(launch / "docs" / "notes.md", "# Notes\n")
    write(launch / "secret.env", "TOKEN=abc\n")
    write(
        launch / "IDEAS.md",
        "- [ ] **Referral program** — invite friends #growth\n"
        "- [x] **Dark mode** #ui #done:2026-01-02\n",
    )

    shop = projects_dir / "shop"
    write(shop / "state.json", json.dumps(SHOP_STATE))

    legacy = projects_dir / "legacy"
    write(legacy / "PRD.md", "# Legacy\n")

    registry = {
        "projects": [
            # Relative paths resolve against the registry's directory
            {"name": "Launch Site", "path": "../../projects/launch-site",
             "status": "active", "assignedTo": "engineering"},
            {"name": "Shop", "path": str(shop), "status": "active",
             "assignedTo": "content"},
            {"name": "Legacy", "path": str(legacy), "status": "active"},
            {"path": str(projects_dir / "nameless")},
            {"name": "Ghost", "path": str(projects_dir / "ghost"), "status": "paused",
             "assignedTo": "research"},
        ]
    }
    write(root / "org" / "projects.json", json.dumps(registry))
    write(root / "org" / "IDEAS.md", GLOBAL_IDEAS)

    # Feeds
    write(root / "org" / "feed" / "engineering.md", ENGINEERING_FEED)
    write(root / "org" / "feed" / "content.md", "**[2026-01-23 11:00]** Drafted launch thread\n")

    # Engineering
    engineering = tmp_path / "workspace-engineering"
    write(engineering / "STATUS.md", ENGINEERING_STATUS)
    write(
        engineering / "outbox.md",
        "## 2026-01-22\n**[16:00]** Deployed v1\n## 2026-01-23\n**[09:30]** Fixed checkout bug\n",
    )
    write(engineering / "inbox" / "001-keys.md",
          "# Need API keys\n**Priority:** urgent\n**Status:** open\n")
    write(engineering / "inbox" / "002-done.md",
          "# Old urgent\n**Priority:** urgent\n**Status:** done\n")
    write(engineering / "inbox" / "003-fm.md",
          "---\ntitle: Review copy\npriority: low\nstatus: in-progress\n---\nBody\n")
    write(engineering / "inbox" / "notes.txt", "not a ticket\n")

    # Content
    content = tmp_path / "workspace-content"
    write(
        content / "outbox.md",
        "**[2026-01-23 10:00]** Published blog post\n**[8:00]** Undated note\n",
    )
    write(content / "tweet-log.md", "First tweet\nline2\n---\nSecond tweet\n---\nThird tweet\n")

    # Research
    research = tmp_path / "workspace-research"
    write(
        research / "findings" / "2026-01-20-pricing.md",
        "# Pricing research\n**Requested by:** CEO\n\nFindings here.\n",
    )
    write(research / "findings" / "notes.md", "no heading\n")

    return root


@pytest.fixture
def config(workspace) -> ConstellationConfig:
    return ConstellationConfig(workspace=workspace, probes=ProbeConfig(enabled=False))


@pytest.fixture
def aggregator(config) -> Aggregator:
    return Aggregator(config, clock=lambda: NOW)
