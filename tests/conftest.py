from __future__ import annotations

import json

import httpx
import pytest

from bizmodel_fit.db import close_db, init_db


@pytest.fixture
async def db(tmp_path, monkeypatch):
    """A fresh SQLite database per test."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    await close_db()
    await init_db()
    yield
    await close_db()


def chat_reply(content) -> httpx.Response:
    """A chat-completions response carrying `content` (dicts are JSON-encoded)."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return httpx.Response(
        200,
        json={"choices": [{"message": {"role": "assistant", "content": content}}], "usage": {"total_tokens": 42}},
    )


@pytest.fixture
def freelancer_answers() -> dict:
    return {
        "incomeGoal": 5000,
        "timeToIncome": "1-3-months",
        "budget": 300,
        "techSkills": 4,
        "selfMotivation": 5,
        "riskTolerance": 4,
        "directCommunicationEnjoyment": 5,
    }
