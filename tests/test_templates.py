from types import MappingProxyType

import pytest
from jinja2 import UndefinedError

from trellis import __version__
from trellis.content import Page
from trellis.templates import GENERATOR_VARS, TemplateEngine


def make_engine(tmp_path, template, site=None, strict=False):
    (tmp_path / "page.html").write_text(template, encoding="utf-8")
    return TemplateEngine([tmp_path], MappingProxyType(site or {"title": "My Site"}), strict=strict)


def test_renders_page_site_and_content(tmp_path):
    engine = make_engine(tmp_path, "{{ site.title }}|{{ page.title }}|{{ content }}")
    page = Page("hello", title="Hello")
    page.html = "<p>Hi</p>"
    assert engine.render("page.html", page) == "My Site|Hello|<p>Hi</p>"


def test_autoescapes_variables_but_not_content(tmp_path):
    engine = make_engine(tmp_path, "{{ page.title }}{{ content }}")
    page = Page("x", title="<b>")
    page.html = "<i>ok</i>"
    assert engine.render("page.html", page) == "&lt;b&gt;<i>ok</i>"


def test_page_variables_are_reachable(tmp_path):
    engine = make_engine(tmp_path, "{{ page.author }}:{{ page['author'] }}")
    page = Page("x", variables={"author": "Ada"})
    assert engine.render("page.html", page) == "Ada:Ada"


def test_generator_globals_and_slug_filter(tmp_path):
    engine = make_engine(tmp_path, "{{ trellis.poweredby }} {{ 'Hello World!' | slug }}")
    assert engine.render("page.html", Page("x")) == f"Trellis v{__version__} hello-world"
    assert GENERATOR_VARS["version"] == __version__


def test_search_roots_are_ordered(tmp_path):
    first, second = tmp_path / "site", tmp_path / "theme"
    for root, text in ((first, "site"), (second, "theme")):
        root.mkdir()
        (root / "page.html").write_text(text, encoding="utf-8")
    (second / "only.html").write_text("theme-only", encoding="utf-8")
    engine = TemplateEngine([first, second], {})
    assert engine.render("page.html", Page("x")) == "site"
    assert engine.render("only.html", Page("x")) == "theme-only"


def test_undefined_is_lenient_unless_strict(tmp_path):
    assert make_engine(tmp_path, "[{{ page.missing }}]").render("page.html", Page("x")) == "[]"
    strict = make_engine(tmp_path, "[{{ page.missing }}]", strict=True)
    with pytest.raises(UndefinedError):
        strict.render("page.html", Page("x"))
