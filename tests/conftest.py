"""Shared test fixtures for the reflect test suite.

Design:
- mongo_db: in-memory MongoDB (mongomock), one per test
- api_client: FastAPI TestClient wired to mongo_db
- runner: CliRunner with the CLI's database lookup pointed at mongo_db
- Async timer tests use pytest-asyncio (@pytest.mark.asyncio)
"""

import logging
from typing import Generator

import mongomock
import pytest
from click.testing import CliRunner
from fastapi.testclient import TestClient

from reflect import db as db_module
from reflect._logging import HANDLER_NAME
from reflect.webapp.api import app, get_db


# ─────────────────────────────────────────────────────────────────────────────
# Markers
# ─────────────────────────────────────────────────────────────────────────────


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


# ─────────────────────────────────────────────────────────────────────────────
# Sample data
# ─────────────────────────────────────────────────────────────────────────────


VIM_COMMANDS = [
    {
        "title": "coc definition",
        "command": "none",
        "keyBinding": ["gd"],
        "action": "go to the definition of the selected text",
        "search": ["coc", "g", "d", "definition", "custom", "movement"],
    },
    {
        "title": "move by given word",
        "command": "none",
        "keyBinding": ["ctrl *"],
        "action": "find the given word the cursor in and iterate through all the posibilites",
        "search": ["default", "*", "movement", "word"],
    },
    {
        "title": "search git file",
        "command": "GFiles",
        "keyBinding": ["ctrl p"],
        "action": "search file inside a git repository locally",
        "search": ["fzf", "custom", "p", "git", "gfiles", "search"],
    },
]

NOTES = [
    {
        "title": "color",
        "search": ["color palette", "visual", "color"],
        "source": ["https://coolors.co/"],
        "content": ["select color palette for webpages"],
    },
    {
        "title": "cache deno modules",
        "search": ["deno", "typescript", "autocompletition", "cache"],
        "source": ["CocCommand deno.cache"],
        "content": ["cache the deno types in the root directory"],
    },
]

REPORTS = [
    {
        "date": "2020-07-05",
        "done": ["set up the api"],
        "quote": ["make it work, then make it right"],
        "notes": ["mongo ids need converting"],
    },
]


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mongo_db():
    """Empty in-memory database."""
    return mongomock.MongoClient()["reflect"]


@pytest.fixture
def seeded_db(mongo_db):
    """Database holding VIM_COMMANDS, NOTES and REPORTS."""
    mongo_db["vim"].insert_many([dict(d) for d in VIM_COMMANDS])
    mongo_db["notes"].insert_many([dict(d) for d in NOTES])
    mongo_db["report"].insert_many([dict(d) for d in REPORTS])
    return mongo_db


@pytest.fixture
def api_client(seeded_db) -> Generator[TestClient, None, None]:
    """TestClient whose requests hit seeded_db."""
    app.dependency_overrides[get_db] = lambda: seeded_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def runner(seeded_db, monkeypatch) -> CliRunner:
    """CLI runner whose commands read and write seeded_db."""
    monkeypatch.setattr(db_module, "get_database", lambda: seeded_db)
    return CliRunner()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove reflect-related variables from the environment."""
    for name in (
        "MONGO_URI",
        "REFLECT_DB_NAME",
        "REFLECT_ENV",
        "REFLECT_CORS_ORIGINS",
        "REFLECT_FILTER_DELAY_MS",
        "HOST",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging(): drop its handler, restore level and propagation."""
    logger = logging.getLogger("reflect")
    level, propagate = logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
