import json

import pytest

from app.services.catalog.preload import collect_catalog, preload_catalog
from app.services.catalog.snapshot_provider import SnapshotProvider, load_snapshot
from app.services.catalog.search import search_titles
from app.services.catalog.types import CatalogPage
from app.services.errors import UpstreamError


def _movie(movie_id, title, **extra):
    return {"id": movie_id, "type": "movie", "primaryTitle": title, **extra}


class PagedProvider:
    """Serves canned pages per keyword and records every request."""

    name = "paged"

    def __init__(self, pages, failing=()):
        self.pages = pages
        self.failing = set(failing)
        self.calls = []

    async def search_page(self, *, query, page_token=None, page_size=None):
        self.calls.append((query, page_token, page_size))
        if query in self.failing:
            raise UpstreamError("Catalog search failed with status 500")
        idx = int(page_token or 0)
        titles = self.pages[query][idx]
        has_more = idx + 1 < len(self.pages[query])
        return CatalogPage(titles=titles, next_page_token=str(idx + 1) if has_more else None)


@pytest.mark.asyncio
async def test_pages_are_bounded_per_keyword():
    provider = PagedProvider(
        {"war": [[_movie(f"tt{i}", f"War {i}")] for i in range(5)]}
    )

    catalog, summary = await collect_catalog(
        provider, keywords=["war"], max_pages=3, page_size=50
    )

    assert [c[1] for c in provider.calls] == [None, "1", "2"]
    assert all(c[2] == 50 for c in provider.calls)
    assert sorted(catalog) == ["tt0", "tt1", "tt2"]
    assert summary.pages == 3
    assert summary.titles == 3


@pytest.mark.asyncio
async def test_merges_across_keywords_first_wins_and_skips_non_movies():
    provider = PagedProvider(
        {
            "red": [[_movie("tt1", "Red"), {"id": "tt2", "type": "tvSeries", "primaryTitle": "Red Show"}]],
            "king": [[_movie("tt1", "Red (again)"), _movie("tt3", "King")]],
        }
    )

    catalog, summary = await collect_catalog(provider, keywords=["red", "king"])

    assert list(catalog) == ["tt1", "tt3"]
    assert catalog["tt1"].title == "Red"
    assert catalog["tt1"].rating is None
    assert summary.keywords == 2


@pytest.mark.asyncio
async def test_failed_keyword_is_skipped_not_retried():
    provider = PagedProvider({"iron": [[_movie("tt7", "Iron")]]}, failing=["zombie"])

    catalog, summary = await collect_catalog(provider, keywords=["zombie", "iron"])

    assert [c[0] for c in provider.calls] == ["zombie", "iron"]
    assert list(catalog) == ["tt7"]
    assert summary.failed_pages == 1
    assert summary.failures and summary.failures[0].startswith("zombie")


@pytest.mark.asyncio
async def test_preload_writes_snapshot_that_snapshot_provider_can_search(tmp_path):
    snapshot = tmp_path / "data" / "movies.json"
    provider = PagedProvider(
        {
            "dark": [[
                _movie("tt0468569", "The Dark Knight", startYear=2008, rating={"aggregateRating": 9.0}),
                _movie("tt1", "Dark Water"),
            ]]
        }
    )

    summary = await preload_catalog(provider, snapshot_path=snapshot, keywords=["dark"])

    assert summary.titles == 2
    assert summary.snapshot_written is True
    raw = json.loads(snapshot.read_text(encoding="utf-8"))
    assert raw[0] == {
        "id": "tt0468569",
        "title": "The Dark Knight",
        "year": 2008,
        "image": None,
        "rating": "9",
        "type": "movie",
    }
    assert [t.id for t in load_snapshot(snapshot)] == ["tt0468569", "tt1"]

    found = await search_titles(SnapshotProvider(str(snapshot)), "knight")
    assert [t.id for t in found] == ["tt0468569"]
    assert found[0].rating == "9"
    assert found[0].image == ""


def test_missing_snapshot_is_empty(tmp_path):
    assert load_snapshot(tmp_path / "nope.json") == []


def test_snapshot_route(client, tmp_path, monkeypatch):
    snapshot = tmp_path / "movies.json"
    snapshot.write_text(
        json.dumps([{"id": "tt1", "title": "Red", "year": None, "image": None, "rating": None, "type": "movie"}]),
        encoding="utf-8",
    )
    monkeypatch.setattr("app.api.routes.catalog.settings.catalog_snapshot_path", str(snapshot))

    resp = client.get("/catalog/movies")

    assert resp.status_code == 200
    assert resp.json()["data"][0]["id"] == "tt1"


def test_preload_route_enqueues_job(client, monkeypatch):
    class FakeJob:
        id = "job-123"

    monkeypatch.setattr("app.api.routes.catalog.enqueue_catalog_preload", lambda: FakeJob())

    resp = client.post("/catalog/preload")

    assert resp.status_code == 202
    assert resp.json() == {"success": True, "jobId": "job-123"}


@pytest.mark.asyncio
async def test_outage_keeps_existing_snapshot(tmp_path):
    snapshot = tmp_path / "movies.json"
    existing = [{"id": "tt1", "title": "Red", "year": None, "image": None, "rating": None, "type": "movie"}]
    snapshot.write_text(json.dumps(existing), encoding="utf-8")
    provider = PagedProvider({}, failing=["red", "king"])

    summary = await preload_catalog(provider, snapshot_path=snapshot, keywords=["red", "king"])

    assert summary.pages == 0
    assert summary.failed_pages == 2
    assert summary.snapshot_written is False
    assert json.loads(snapshot.read_text(encoding="utf-8")) == existing


@pytest.mark.asyncio
async def test_partial_outage_still_writes_snapshot(tmp_path):
    snapshot = tmp_path / "movies.json"
    provider = PagedProvider({"iron": [[_movie("tt7", "Iron")]]}, failing=["zombie"])

    summary = await preload_catalog(provider, snapshot_path=snapshot, keywords=["zombie", "iron"])

    assert summary.snapshot_written is True
    assert [t.id for t in load_snapshot(snapshot)] == ["tt7"]
