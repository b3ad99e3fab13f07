"""
Unit tests for SourceExtractor.

Tests cover:
- New, changed and unchanged sources
- Idempotence of a second run
- Previous modification time captured before overwriting
- Job boundary error handling
"""

import os
from datetime import datetime, timezone

import pytest

from models.sourcemap import SourcemapDocument
from services.components.source_extractor import SourceExtractor

URL = "https://spaces.test/foo.map"


def document(sources, contents) -> SourcemapDocument:
    return SourcemapDocument.model_validate({"sources": sources, "sourcesContent": contents})


class TestSourceExtractor:
    """Test suite for SourceExtractor"""

    @pytest.fixture
    def extractor(self, store, fetcher):
        return SourceExtractor(store, fetcher=fetcher)

    @pytest.mark.asyncio
    async def test_new_file_is_written(self, extractor, mirror_root):
        files = await extractor.extract(document(["webpack:///src/app.js"], ["const x=1;"]))

        assert len(files) == 1
        assert files[0].path == os.path.join(str(mirror_root), "src", "app.js")
        assert files[0].is_changed is True
        assert files[0].previous_modified is None
        assert files[0].is_new
        assert (mirror_root / "src" / "app.js").read_text() == "const x=1;"

    @pytest.mark.asyncio
    async def test_mirror_root_dot_paths(self, fetcher, tmp_path, monkeypatch):
        """With the default root, report paths look like ./src/app.js"""
        from services.storage.file_store import LocalFileStore

        monkeypatch.chdir(tmp_path)
        extractor = SourceExtractor(LocalFileStore("."), fetcher=fetcher)

        files = await extractor.extract(document(["webpack:///src/app.js"], ["const x=1;"]))

        assert files[0].path == "./src/app.js"
        assert (tmp_path / "src" / "app.js").exists()

    @pytest.mark.asyncio
    async def test_unchanged_file_is_not_touched(self, extractor, mirror_root):
        target = mirror_root / "src" / "app.js"
        target.parent.mkdir(parents=True)
        target.write_text("const x=1;")
        stamp = datetime(2020, 1, 1, tzinfo=timezone.utc).timestamp()
        os.utime(target, (stamp, stamp))

        files = await extractor.extract(document(["webpack:///src/app.js"], ["const x=1;"]))

        assert files[0].is_changed is False
        assert files[0].previous_modified is None
        assert target.stat().st_mtime == stamp

    @pytest.mark.asyncio
    async def test_changed_file_keeps_previous_modified_time(self, extractor, mirror_root):
        target = mirror_root / "src" / "app.js"
        target.parent.mkdir(parents=True)
        target.write_text("const x=0;")
        previous = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
        os.utime(target, (previous.timestamp(), previous.timestamp()))

        files = await extractor.extract(document(["webpack:///src/app.js"], ["const x=1;"]))

        assert files[0].is_changed is True
        assert files[0].previous_modified == previous
        assert target.read_text() == "const x=1;"
        assert target.stat().st_mtime != previous.timestamp()

    @pytest.mark.asyncio
    async def test_second_run_is_idempotent(self, extractor, multi_file_sourcemap):
        doc = SourcemapDocument.model_validate(multi_file_sourcemap)

        first = await extractor.extract(doc)
        second = await extractor.extract(doc)

        assert [f.is_changed for f in first] == [True, True]
        assert [f.is_changed for f in second] == [False, False]
        assert [f.path for f in first] == [f.path for f in second]

    @pytest.mark.asyncio
    async def test_entries_without_content_are_skipped(self, extractor, multi_file_sourcemap, mirror_root):
        files = await extractor.extract(SourcemapDocument.model_validate(multi_file_sourcemap))

        paths = [os.path.relpath(f.path, str(mirror_root)) for f in files]
        assert paths == [os.path.join("src", "app.js"), os.path.join("src", "utils", "format.js")]
        assert not (mirror_root / "webpack").exists()
        assert not (mirror_root / "src" / "empty.js").exists()

    @pytest.mark.asyncio
    async def test_crlf_content_round_trips(self, extractor, mirror_root):
        doc = document(["webpack:///src/win.js"], ["a\r\nb\r\n"])

        await extractor.extract(doc)
        files = await extractor.extract(doc)

        assert files[0].is_changed is False
        assert (mirror_root / "src" / "win.js").read_bytes() == b"a\r\nb\r\n"

    @pytest.mark.asyncio
    async def test_sources_escaping_root_are_skipped(self, extractor, mirror_root):
        doc = document(
            ["webpack:///../outside.js", "webpack:///src/inside.js"],
            ["evil", "fine"],
        )

        files = await extractor.extract(doc)

        assert len(files) == 1
        assert files[0].path.endswith(os.path.join("src", "inside.js"))
        assert not (mirror_root.parent / "outside.js").exists()

    @pytest.mark.asyncio
    async def test_process_success(self, extractor, mock_session, make_response, sample_sourcemap):
        session = mock_session({URL: make_response(200, sample_sourcemap)})

        outcome = await extractor.process(session, URL)

        assert outcome.success is True
        assert outcome.error is None
        assert outcome.url == URL
        assert len(outcome.changed_files) == 1

    @pytest.mark.asyncio
    async def test_process_http_404(self, extractor, mock_session, make_response):
        session = mock_session({URL: make_response(404)})

        outcome = await extractor.process(session, URL)

        assert outcome.success is False
        assert outcome.error == "HTTP 404"
        assert outcome.files == []

    @pytest.mark.asyncio
    async def test_process_missing_sources_content(self, extractor, mock_session, make_response):
        session = mock_session({URL: make_response(200, {"sources": ["webpack:///a.js"]})})

        outcome = await extractor.process(session, URL)

        assert outcome.success is False
        assert outcome.error == "Invalid sourcemap format"

    @pytest.mark.asyncio
    async def test_process_storage_failure(self, extractor, mock_session, make_response, mirror_root):
        # A directory where the file should go makes the read fail
        (mirror_root / "src" / "app.js").mkdir(parents=True)
        (mirror_root / "src" / "app.js" / "x").write_text("")
        body = {"sources": ["webpack:///src/app.js"], "sourcesContent": ["const x=1;"]}
        session = mock_session({URL: make_response(200, body)})

        outcome = await extractor.process(session, URL)

        assert outcome.success is False
        assert outcome.error

    @pytest.mark.asyncio
    async def test_process_unexpected_error_is_contained(self, extractor, mock_session):
        session = mock_session({URL: RuntimeError("boom")})

        outcome = await extractor.process(session, URL)

        assert outcome.success is False
        assert outcome.error == "boom"
