from __future__ import annotations

from typing import Any, Dict

import pytest


def make_cog(**fields: Any) -> Dict[str, Any]:
    cog = {
        "author": ["Someone"],
        "description": "",
        "short": "A cog.",
        "end_user_data_statement": "This cog does not persist any data.",
        "min_bot_version": "0.0.0",
        "max_bot_version": "0.0.0",
        "min_python_version": [3, 8, 1],
        "hidden": False,
        "disabled": False,
        "type": "COG",
        "requirements": [],
        "permissions": [],
        "tags": [],
    }
    cog.update(fields)
    return cog


def make_repo(name: str, category: str = "approved", cogs: Dict[str, Any] | None = None, **fields: Any) -> Dict[str, Any]:
    repo = {
        "name": name,
        "rx_category": category,
        "rx_branch": "main",
        "rx_cogs": cogs or {},
    }
    repo.update(fields)
    return repo


@pytest.fixture
def sample_index() -> Dict[str, Any]:
    """One approved repo with two visible cogs, one unapproved repo with one cog."""
    return {
        "https://github.com/example/approved-cogs@main": make_repo(
            "Approved-Cogs",
            cogs={
                "weather": make_cog(author=["Sky"], tags=["Utility", "Weather"]),
                "trivia": make_cog(author=["Quiz"], tags=["Fun"], description="Play trivia games."),
            },
        ),
        "https://github.com/example/community-cogs": make_repo(
            "Community",
            category="unapproved",
            cogs={"memes": make_cog(author=["Lol"], tags=["fun"])},
        ),
    }
