import runpy

import pytest
from click.testing import CliRunner

from trellis import __version__
from trellis.cli import cli

SKIP_GIT = {"TRELLIS_SKIP_GIT_INIT": "1"}


class FakePrompt:
    def __init__(self, answer):
        self.answer = answer

    def ask(self):
        return self.answer


def fake_questionary(monkeypatch, section=". (root)", title="Hello World", tags="a, b", menu=False):
    monkeypatch.setattr("trellis.cli.questionary.select", lambda *a, **k: FakePrompt(section))
    answers = iter([title, tags])
    monkeypatch.setattr("trellis.cli.questionary.text", lambda *a, **k: FakePrompt(next(answers)))
    monkeypatch.setattr("trellis.cli.questionary.confirm", lambda *a, **k: FakePrompt(menu))


@pytest.fixture
def project(tmp_path):
    target = tmp_path / "mysite"
    result = CliRunner().invoke(cli, ["new", str(target)], env=SKIP_GIT)
    assert result.exit_code == 0, result.output
    return target


def test_cli_new_scaffolds_project(project):
    assert (project / "trellis.yaml").exists()
    assert (project / "content" / "about.md").exists()
    assert (project / "content" / "blog" / "hello-world.md").exists()
    assert (project / "layouts" / "_default" / "page.html").exists()
    assert (project / "static" / "css" / "style.css").exists()
    assert not (project / ".git").exists()


def test_cli_new_refuses_non_empty_directory(project):
    result = CliRunner().invoke(cli, ["new", str(project)], env=SKIP_GIT)
    assert result.exit_code != 0
    assert "non-empty directory" in result.output


def test_cli_build_scaffolded_site(project):
    result = CliRunner().invoke(cli, ["build", str(project)])
    assert result.exit_code == 0, result.output
    out = project / "_site"
    assert "Built 9 pages into" in result.output
    assert (out / "index.html").exists()
    assert (out / "about" / "index.html").exists()
    assert (out / "blog" / "hello-world" / "index.html").exists()
    assert (out / "blog" / "index.html").exists()
    assert (out / "tagswelcome" / "index.html").exists()
    assert (out / "tags" / "index.html").exists()
    assert (out / "css" / "style.css").exists()
    about = (out / "about" / "index.html").read_text(encoding="utf-8")
    assert '<a href="/blog">Blog</a>' in about
    assert f"Trellis v{__version__}" in about


def test_cli_build_uses_working_directory_and_dest(project, tmp_path, monkeypatch):
    monkeypatch.chdir(project)
    dest = tmp_path / "public"
    result = CliRunner().invoke(cli, ["build", "--dest", str(dest), "--workers", "2"])
    assert result.exit_code == 0, result.output
    assert (dest / "_site" / "index.html").exists()


def test_cli_build_reports_failure(tmp_path):
    result = CliRunner().invoke(cli, ["build", str(tmp_path)])
    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "Content directory not found" in result.output


def test_cli_build_reports_page_errors(project):
    (project / "layouts" / "_default" / "page.html").unlink()
    result = CliRunner().invoke(cli, ["build", str(project)])
    assert result.exit_code == 1
    assert "Page: about" in result.output
    assert "Layout '_default/page.html' not found for page 'about'!" in result.output


def test_cli_build_missing_theme(project):
    result = CliRunner().invoke(cli, ["build", str(project), "--theme", "ghost"])
    assert result.exit_code == 1
    assert "Theme 'ghost' not found" in result.output


def test_cli_page_writes_front_matter(project, monkeypatch):
    monkeypatch.chdir(project)
    fake_questionary(monkeypatch, section=". (root)", title="Release Notes", tags="news, python", menu=True)
    result = CliRunner().invoke(cli, ["page"])
    assert result.exit_code == 0, result.output
    text = (project / "content" / "release-notes.md").read_text(encoding="utf-8")
    assert text == "---\ntitle: Release Notes\ntags:\n- news\n- python\nmenu: main\n---\n\n"


def test_cli_page_refuses_existing_file(project, monkeypatch):
    monkeypatch.chdir(project)
    fake_questionary(monkeypatch, section="blog", title="Hello World", tags="")
    result = CliRunner().invoke(cli, ["page"])
    assert result.exit_code != 0
    assert "File already exists" in result.output


def test_cli_page_aborts_when_cancelled(project, monkeypatch):
    monkeypatch.chdir(project)
    fake_questionary(monkeypatch, section=None)
    result = CliRunner().invoke(cli, ["page"])
    assert result.exit_code == 1
    assert "Aborted" in result.output


def test_cli_page_outside_project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["page"])
    assert result.exit_code != 0
    assert "No content/ directory found" in result.output


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_module_entry_point(monkeypatch):
    monkeypatch.setattr("sys.argv", ["trellis", "--version"])
    with pytest.raises(SystemExit) as excinfo:
        runpy.run_module("trellis", run_name="__main__")
    assert excinfo.value.code == 0
