from __future__ import annotations

import importlib
import sys

import pytest
from fastapi.testclient import TestClient

from app.types import Dimension, Question, Subscale

RELOAD_ORDER = ("app.config", "app.db", "app.models", "app.email", "app.main")


def build_catalog(reversed_ids: tuple[int, ...] = (), extra: int = 0) -> list[Question]:
    """Canonical 36-question layout: 3 dimensions x 3 subscales x 4 items."""

    questions: list[Question] = []
    order = 1
    for dimension in Dimension:
        for subscale in Subscale:
            for _ in range(4):
                questions.append(
                    Question(
                        question_order=order,
                        text=f"{dimension.value} {subscale.value} #{order}",
                        dimension=dimension,
                        subscale=subscale,
                        is_reversed=order in reversed_ids,
                    )
                )
                order += 1
    for _ in range(extra):
        questions.append(Question(order, f"extra #{order}", Dimension.ALIGNMENT, Subscale.PD))
        order += 1
    return questions


def uniform_responses(value: int, count: int = 36) -> dict[int, int]:
    return {question_id: value for question_id in range(1, count + 1)}


def token_from(url: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1]


@pytest.fixture
def catalog() -> list[Question]:
    return build_catalog()


def _reload_app():
    for name in RELOAD_ORDER:
        if name in sys.modules:
            importlib.reload(sys.modules[name])
        else:
            importlib.import_module(name)
    return sys.modules["app.main"]


@pytest.fixture
def api(tmp_path, monkeypatch):
    db_path = tmp_path / "assessment.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("RANDOMIZATION_SECRET", "test-randomization-secret")
    monkeypatch.setenv("TOKEN_SECRET", "test-token-secret")
    monkeypatch.setenv("APP_URL", "http://testserver")
    main = _reload_app()

    outbox: list[dict] = []

    async def fake_send_email(to_email, subject, text_content, html_content, **kwargs):
        outbox.append({"to": to_email, "subject": subject, "text": text_content, "html": html_content})
        return f"<message-{len(outbox)}@testserver>"

    monkeypatch.setattr(sys.modules["app.email"], "send_email", fake_send_email)

    with TestClient(main.app) as client:
        client.outbox = outbox
        client.db_path = db_path
        client.main = main
        yield client
