"""
Pytest fixtures and configuration for WordPress Article Pipeline tests.
"""

import json
from pathlib import Path

import pytest

from wp_article_pipeline.models import SeoLinkRule


@pytest.fixture
def sample_fields() -> dict:
    """Fields of a well-formed article completion."""
    return {
        "title": "Best Budget Laptops for Students",
        "content": "<h2>Why Budget Laptops</h2><p>A budget laptop covers most coursework.</p>"
                   "<h2>Our Picks</h2><p>Each laptop below costs under $600.</p>",
        "excerpt": "Affordable laptops that handle everyday student work.",
        "tags": ["laptops", "students", "budget"],
    }


@pytest.fixture
def sample_completion(sample_fields: dict) -> str:
    """A valid JSON completion."""
    return json.dumps(sample_fields)


@pytest.fixture
def broken_completion() -> str:
    """A completion whose content has a raw newline and unescaped quotes."""
    return (
        '{"title": "Laptop Guide", "content": "<p>First line\n'
        'second "quoted" line</p>", "excerpt": "Short summary", "tags": ["tech"]}'
    )


@pytest.fixture
def sample_article_html() -> str:
    """Article body with headings, paragraphs and an existing link."""
    return (
        "<h2>Choosing a Laptop</h2>"
        "<p>A good laptop lasts for years.</p>"
        '<p>Compare prices at <a href="https://shop.example/laptop">the shop</a> first.</p>'
        "<h3>Laptop Batteries</h3>"
        "<p>Battery life matters on any laptop.</p>"
    )


@pytest.fixture
def sample_rules() -> list[SeoLinkRule]:
    """Two link rules."""
    return [
        SeoLinkRule(keyword="laptop", url="https://aff.example/laptop", max_count=2),
        SeoLinkRule(keyword="battery", url="https://aff.example/battery", max_count=1),
    ]


@pytest.fixture
def rules_json_file(tmp_path: Path) -> Path:
    """Rules in the stored seoLinks JSON shape."""
    path = tmp_path / "rules.json"
    path.write_text(json.dumps([
        {"keyword": "laptop", "url": "https://aff.example/laptop", "maxCount": 2},
        {"keyword": "battery", "url": "https://aff.example/battery", "maxCount": 1},
    ]))
    return path


@pytest.fixture
def rules_csv_file(tmp_path: Path) -> Path:
    """Rules as a CSV file."""
    path = tmp_path / "rules.csv"
    path.write_text(
        "keyword,url,max_count\n"
        "laptop,https://aff.example/laptop,3\n"
        "battery,https://aff.example/battery,\n"
    )
    return path
