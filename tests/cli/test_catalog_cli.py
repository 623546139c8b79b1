"""Tests for the catalog sub-commands."""

import json

import pytest


def _ok(records=None, **kwargs):
    return {"status_code": 200, "json": records or [], **kwargs}


@pytest.mark.unit
def test_catalog_without_subcommand_shows_help(invoke):
    result, seen = invoke(_ok(), "catalog")
    assert result.exit_code == 0
    assert "books" in result.stdout
    assert seen == []


@pytest.mark.unit
def test_books_page_translates_to_offset(invoke):
    result, seen = invoke(
        _ok([{"id": 11}], headers={"Content-Range": "10-10/25"}),
        "catalog",
        "books",
        "--page",
        "2",
        "--page-size",
        "10",
        "--title",
        "ring",
        "--sort",
        "year.desc",
    )
    assert result.exit_code == 0
    params = seen[0].url.params
    assert params["limit"] == "10"
    assert params["offset"] == "10"
    assert params["title"] == "ilike.*ring*"
    assert params["order"] == "year.desc"
    assert "1 of 25 rows" in result.output


@pytest.mark.unit
def test_books_first_page_has_no_offset(invoke):
    _, seen = invoke(_ok(), "catalog", "books")
    assert "offset" not in seen[0].url.params
    assert seen[0].url.params["select"] == "*,author:authors(name),genre:genres(name)"


@pytest.mark.unit
def test_authors_by_name(invoke):
    _, seen = invoke(_ok(), "catalog", "authors", "--name", "austen")
    assert seen[0].url.path == "/authors"
    assert seen[0].url.params["name"] == "ilike.*austen*"


@pytest.mark.unit
def test_genres(invoke):
    result, seen = invoke(_ok([{"id": 1, "name": "Fantasy"}]), "catalog", "genres")
    assert result.exit_code == 0
    assert seen[0].url.params["order"] == "name.asc"
    assert json.loads(result.stdout) == [{"id": 1, "name": "Fantasy"}]


@pytest.mark.unit
def test_details_view(invoke):
    _, seen = invoke(_ok(), "catalog", "details", "--limit", "3")
    assert seen[0].url.path == "/book_details"
    assert seen[0].url.params["limit"] == "3"


@pytest.mark.unit
def test_top_genres(invoke):
    _, seen = invoke(_ok(), "catalog", "top-genres", "--limit", "3")
    assert seen[0].url.path == "/rpc/get_top_genres"
    assert json.loads(seen[0].content) == {"limit_count": 3}


@pytest.mark.unit
def test_search(invoke):
    _, seen = invoke(_ok(), "catalog", "search", "dragon")
    assert seen[0].url.path == "/rpc/search_books"
    assert json.loads(seen[0].content) == {"search_term": "dragon"}


@pytest.mark.unit
def test_genre_counts(invoke):
    _, seen = invoke(_ok([{"genre_id": 1, "count": 4}]), "catalog", "genre-counts")
    assert seen[0].url.params["select"] == "genre_id,count()"
