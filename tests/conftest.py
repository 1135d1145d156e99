"""Shared test fixtures for Mustachio tests."""

import json
from pathlib import Path

import pytest


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Create a directory with a template, JSON data and partials."""
    (tmp_path / "page.mustache").write_text(
        "<h1>{{title}}</h1>\n{{#items}}\n  {{> item}}\n{{/items}}\n", encoding="utf-8"
    )
    (tmp_path / "data.json").write_text(
        json.dumps({"title": "A & B", "items": [{"name": "one"}, {"name": "two"}]}),
        encoding="utf-8",
    )
    partials_dir = tmp_path / "partials"
    partials_dir.mkdir()
    (partials_dir / "item.mustache").write_text("<li>{{name}}</li>\n", encoding="utf-8")
    return tmp_path
