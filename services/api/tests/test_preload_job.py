from app.services.catalog.imdb_provider import ImdbApiProvider
from app.services.catalog.preload import PreloadSummary
from app.workers import jobs


def test_preload_job_runs_with_settings(monkeypatch, tmp_path):
    captured = {}

    async def fake_preload(provider, *, snapshot_path, keywords, max_pages, page_size):
        captured.update(
            provider=provider,
            snapshot_path=snapshot_path,
            keywords=list(keywords),
            max_pages=max_pages,
            page_size=page_size,
        )
        return PreloadSummary(keywords=len(captured["keywords"]), pages=1, titles=4)

    monkeypatch.setattr(jobs, "preload_catalog", fake_preload)
    monkeypatch.setattr(jobs.settings, "catalog_snapshot_path", str(tmp_path / "movies.json"))
    monkeypatch.setattr(jobs.settings, "preload_keywords", ["batman", "thor"])

    result = jobs.preload_catalog_job()

    assert isinstance(captured["provider"], ImdbApiProvider)
    assert captured["snapshot_path"] == str(tmp_path / "movies.json")
    assert captured["keywords"] == ["batman", "thor"]
    assert captured["max_pages"] == 3
    assert captured["page_size"] == 50
    assert result["titles"] == 4
