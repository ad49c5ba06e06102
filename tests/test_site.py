"""Tests for whole-site builds."""

import threading

import pytest

from folio import BuildConfig, ErrorCode, LayoutError, OutputCollisionError, Site, build_site
from folio.site import BuildReport, PageResult

from .conftest import assert_contains


class TestBuild:
    """Discovering, rendering and emitting pages."""

    def test_discover(self, site_tree):
        source, output = site_tree
        site = Site(BuildConfig(source_dir=source, output_dir=output))
        assert site.discover() == ["guides/diesel.folio", "index.folio"]

    def test_build_writes_mirrored_tree(self, site_tree):
        source, output = site_tree
        report = build_site(BuildConfig(source_dir=source, output_dir=output))
        assert report.ok
        assert [r.name for r in report.results] == ["guides/diesel.folio", "index.folio"]
        assert (output / "index.html").is_file()
        html = (output / "guides" / "diesel.html").read_text()
        assert_contains(
            html,
            "<title>Composing Applications with Diesel</title>",
            "<strong>patterns</strong>",
            "if a &lt; b",
            'href="https://example.com/main.rs"',
        )
        assert not (output / "notes.txt.html").exists()

    def test_rebuild_is_idempotent(self, site_tree):
        source, output = site_tree
        config = BuildConfig(source_dir=source, output_dir=output)
        first = build_site(config)
        before = (output / "guides" / "diesel.html").read_bytes()
        second = build_site(config)
        assert len(first.written) == 2
        assert second.written == ()
        assert second.ok
        assert (output / "guides" / "diesel.html").read_bytes() == before

    def test_failing_page_does_not_affect_siblings(self, site_tree):
        source, output = site_tree
        (source / "broken.folio").write_text("div\n    p one\n  p two\n")
        report = build_site(BuildConfig(source_dir=source, output_dir=output, max_workers=3))
        assert not report.ok
        (failed,) = report.failed
        assert failed.name == "broken.folio"
        assert failed.error.code is ErrorCode.INCONSISTENT_INDENT
        assert not (output / "broken.html").exists()
        assert (output / "index.html").is_file()
        assert (output / "guides" / "diesel.html").is_file()

    def test_results_in_name_order_with_many_workers(self, tmp_path):
        source = tmp_path / "src"
        source.mkdir()
        names = [f"page-{i:02d}.folio" for i in range(20)]
        for name in reversed(names):
            (source / name).write_text(f"---\ntitle: {name}\n---\np {name}\n")
        report = build_site(
            BuildConfig(source_dir=source, output_dir=tmp_path / "out", max_workers=8)
        )
        assert [r.name for r in report.results] == names
        assert all(r.written for r in report.results)

    def test_pages_build_on_worker_threads(self, tmp_path, monkeypatch):
        source = tmp_path / "src"
        source.mkdir()
        for i in range(8):
            (source / f"p{i}.folio").write_text("p x")
        site = Site(BuildConfig(source_dir=source, output_dir=tmp_path / "out", max_workers=4))

        seen: set[str] = set()
        original = Site.build_page

        def recording(self, name):
            seen.add(threading.current_thread().name)
            return original(self, name)

        monkeypatch.setattr(Site, "build_page", recording)
        report = site.build()
        assert report.ok
        assert len(report.results) == 8
        assert threading.main_thread().name not in seen

    def test_custom_layout_and_default_title(self, site_tree, tmp_path):
        source, output = site_tree
        layout = tmp_path / "layout.html"
        layout.write_text("<head><title>{{ title }}</title></head><main>{{ content }}</main>")
        (source / "untitled.folio").write_text("p bare")
        build_site(
            BuildConfig(
                source_dir=source,
                output_dir=output,
                layout_path=layout,
                default_title="Docs",
            )
        )
        html = (output / "untitled.html").read_text()
        assert html == "<head><title>Docs</title></head><main><p>bare</p></main>\n"

    def test_invalid_layout_fails_before_build(self, site_tree, tmp_path):
        source, output = site_tree
        layout = tmp_path / "layout.html"
        layout.write_text("no slots")
        with pytest.raises(LayoutError):
            Site(BuildConfig(source_dir=source, output_dir=output, layout_path=layout))
        assert not output.exists()

    def test_empty_source(self, tmp_path):
        report = build_site(BuildConfig(source_dir=tmp_path, output_dir=tmp_path / "out"))
        assert report.results == ()
        assert report.ok

    def test_pages_sharing_an_output_file_all_fail(self, tmp_path):
        source = tmp_path / "src"
        source.mkdir()
        (source / "a.folio").write_text("p first")
        (source / "a.html.folio").write_text("p second")
        (source / "b.folio").write_text("p other")
        output = tmp_path / "out"
        report = build_site(BuildConfig(source_dir=source, output_dir=output, max_workers=2))
        assert [r.name for r in report.results] == ["a.folio", "a.html.folio", "b.folio"]
        assert [r.ok for r in report.results] == [False, False, True]
        for result in report.failed:
            assert isinstance(result.error, OutputCollisionError)
            assert result.error.code is ErrorCode.OUTPUT_COLLISION
            assert result.output == output / "a.html"
        assert "a.html.folio" in report.results[0].error.message
        assert "a.folio" in report.results[1].error.message
        assert not (output / "a.html").exists()
        assert (output / "b.html").is_file()

    def test_deeply_nested_page_fails_alone(self, tmp_path):
        source = tmp_path / "src"
        source.mkdir()
        (source / "a.folio").write_text("p a")
        (source / "b.folio").write_text("\n".join("  " * level + "div" for level in range(500)))
        (source / "c.folio").write_text("p c")
        report = build_site(
            BuildConfig(source_dir=source, output_dir=tmp_path / "out", max_workers=2)
        )
        assert [r.ok for r in report.results] == [True, False, True]
        assert report.results[1].error.code is ErrorCode.NESTING_TOO_DEEP


class TestReport:
    """BuildReport summaries."""

    def test_summary_counts(self):
        report = BuildReport(
            results=(
                PageResult(name="a", written=True),
                PageResult(name="b"),
                PageResult(name="c", error=LayoutError("bad")),
            ),
            elapsed=0.5,
        )
        assert report.summary() == "3 pages: 1 written, 1 unchanged, 1 failed in 0.50s"
        assert [r.name for r in report.failed] == ["c"]
        assert not report.ok
