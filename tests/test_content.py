from pathlib import Path

import pytest

from trellis.content import (
    FileContentLoader,
    HomepageNode,
    ListNode,
    NodeType,
    Page,
    PageBuilder,
    PageConverter,
    TaxonomyNode,
)
from trellis.extractors import split_frontmatter


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_page_identity_from_file(tmp_path):
    content = tmp_path / "content"
    source = write(content / "blog" / "post-1.md", "Body")
    page = Page.from_file(source, content)
    assert page.id == page.pathname == "blog/post-1"
    assert page.path == "blog"
    assert page.name == "post-1"
    assert page.section == "blog"
    assert page.title == "post-1"
    assert page.virtual is False
    assert page.node_type is NodeType.PAGE


def test_page_identity_slugifies_but_title_keeps_basename(tmp_path):
    content = tmp_path / "content"
    source = write(content / "My Blog" / "Deep" / "Post One.md", "Body")
    page = Page.from_file(source, content)
    assert page.id == "my-blog/deep/post-one"
    assert page.path == "my-blog/deep"
    assert page.name == "post-one"
    assert page.section == "my-blog"
    assert page.title == "Post One"


def test_root_page_has_no_section(tmp_path):
    content = tmp_path / "content"
    page = Page.from_file(write(content / "about.md", ""), content)
    assert page.id == "about"
    assert page.path == ""
    assert page.section == ""


def test_section_is_derived_lazily_from_path():
    page = Page("x", path="docs/guide")
    assert page.section == "docs"
    page.section = "override"
    assert page.section == "override"


def test_virtual_page_defaults_and_url():
    page = Page("blog/index", pathname="blog", node=ListNode(pages=[]))
    assert page.virtual is True
    assert page.node_type is NodeType.LIST
    assert page.url == "/blog/"
    assert page["list"] == []
    home = Page("homepage", pathname="", node=HomepageNode())
    assert home.url == "/"


def test_taxonomy_node_exposes_template_variables():
    page = Page("tagsa", node=TaxonomyNode(singular="tag"))
    assert page.node.singular == "tag"
    assert page["singular"] == "tag"
    assert len(page["list"]) == 0


def test_loader_finds_files_sorted_by_extension(tmp_path):
    content = tmp_path / "content"
    write(content / "b.md", "")
    write(content / "a.md", "")
    write(content / "sub" / "c.md", "")
    write(content / "notes.txt", "")
    files = FileContentLoader(content, "md").iter_files()
    assert [f.relative_to(content).as_posix() for f in files] == ["a.md", "b.md", "sub/c.md"]


def test_loader_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileContentLoader(tmp_path / "nope").iter_files()


def test_split_frontmatter():
    raw, body = split_frontmatter("---\ntitle: Hi\ntags: [a]\n---\nBody text\n")
    assert raw == "title: Hi\ntags: [a]"
    assert body == "Body text\n"
    assert split_frontmatter("No front matter") == ("", "No front matter")
    assert split_frontmatter("---\n---\nBody") == ("", "Body")


def test_builder_keeps_raw_frontmatter_and_body(tmp_path):
    content = tmp_path / "content"
    source = write(content / "blog" / "post.md", "---\ntitle: Post\n---\n# Hi\n")
    page = PageBuilder(content).build(source)
    assert page.frontmatter == "title: Post"
    assert page.body == "# Hi\n"
    assert page.html == ""


def test_converter_promotes_title_section_and_layout():
    page = Page("blog/post", path="blog", virtual=False)
    page.frontmatter = "title: Real Title\nsection: news\nlayout: wide\ntags: [a]\n"
    page.body = "Some *text*"
    PageConverter().convert(page)
    assert page.title == "Real Title"
    assert page.section == "news"
    assert page.layout == "wide"
    assert "title" not in page.variables
    assert "section" not in page.variables
    assert page["layout"] == "wide"
    assert page["tags"] == ["a"]
    assert "<em>text</em>" in page.content


def test_converter_tolerates_malformed_frontmatter(caplog):
    page = Page("broken", virtual=False)
    page.frontmatter = "title: [unclosed"
    page.body = "Body"
    PageConverter().convert(page)
    assert page.title == "Default title"
    assert page.variables == {}
    assert "malformed yaml front matter in 'broken'" in caplog.text


def test_converter_json_and_html_formats():
    page = Page("p", virtual=False)
    page.frontmatter = '{"title": "Json", "menu": "main"}'
    page.body = "<p>raw</p>"
    PageConverter(frontmatter_format="json", body_format="html").convert(page)
    assert page.title == "Json"
    assert page["menu"] == "main"
    assert page.html == "<p>raw</p>"


def test_converter_unknown_format_is_rejected():
    with pytest.raises(ValueError):
        PageConverter(body_format="rst").convert(Page("p", virtual=False))
