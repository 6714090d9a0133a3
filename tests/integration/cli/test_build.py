"""Integration tests for the build and render commands"""

from typer.testing import CliRunner

from mdspa.cli.cli import app


runner = CliRunner()


def _site(tmp_path):
    site = tmp_path / "site"
    site.mkdir()
    (site / "hello.md").write_text("---\ntitle: Hello\n---\n# World\n", encoding="utf-8")
    (site / "logo.png").write_bytes(b"\x89PNG")
    return site


def test_build_cmd_writes_site(tmp_path, monkeypatch):
    """build renders pages, copies assets and writes the feed."""
    monkeypatch.chdir(tmp_path)
    site = _site(tmp_path)
    result = runner.invoke(app, [
        "build", str(site),
        "--outdir", str(tmp_path / "dist"),
        "--root-address", "https://example.com",
        "--title", "Example",
        "--description", "An example",
        "--log-level", "warning",
    ])

    assert result.exit_code == 0, result.output
    assert "Build complete - 1 pages, 1 copied, 0 up to date, 0 ignored, 1 feed items" in result.output
    assert (tmp_path / "dist" / "hello" / "_.html").exists()
    assert (tmp_path / "dist" / "logo.png").read_bytes() == b"\x89PNG"
    assert (tmp_path / "dist" / "feed.rss").exists()


def test_build_cmd_log_file(tmp_path, monkeypatch):
    """--log-file also writes log records to the given file."""
    monkeypatch.chdir(tmp_path)
    site = _site(tmp_path)
    log = tmp_path / "build.log"
    result = runner.invoke(app, [
        "build", str(site),
        "--root-address", "https://example.com",
        "--title", "Example",
        "--description", "An example",
        "--log-file", str(log),
    ])

    assert result.exit_code == 0, result.output
    assert "Generating" in log.read_text(encoding="utf-8")


def test_build_cmd_missing_source(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["build", str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert "Error: Build failed" in result.output


def test_build_cmd_invalid_feed(tmp_path, monkeypatch):
    """Without a root address the feed is invalid and the build fails."""
    monkeypatch.chdir(tmp_path)
    site = _site(tmp_path)
    result = runner.invoke(app, ["build", str(site), "--title", "T", "--description", "D"])
    assert result.exit_code == 1
    assert "Invalid RSS feed" in result.output


def test_build_cmd_invalid_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    result = runner.invoke(app, ["build"])
    assert result.exit_code == 1
    assert "Invalid config.yaml" in result.output


def test_render_cmd_prints_fragment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    doc = tmp_path / "post.md"
    doc.write_text("# Hi\n\n[Next](./post/next.md)\n", encoding="utf-8")
    result = runner.invoke(app, ["render", str(doc)])
    assert result.exit_code == 0, result.output
    assert '<section id="hi">' in result.output
    assert 'hx-get="next/_.html"' in result.output


def test_build_cmd_uppercase_log_level_env(tmp_path, monkeypatch):
    """MDSPA_LOG_LEVEL accepts upper-case level names."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MDSPA_LOG_LEVEL", "WARNING")
    site = _site(tmp_path)
    result = runner.invoke(app, [
        "build", str(site),
        "--root-address", "https://example.com",
        "--title", "Example",
        "--description", "An example",
    ])
    assert result.exit_code == 0, result.output
    assert "Build complete" in result.output
