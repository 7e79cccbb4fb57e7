"""Command-line interface for Trellis.

Commands:
- build: Build the site into the output directory.
- new: Scaffold a new Trellis project.
- page: Create a new content file interactively.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .config import load_config
from .errors import BuildError, TrellisError
from .utils import urlize

# Path to the starter site copied by `trellis new`
_SCAFFOLD_DIR = Path(__file__).parent / "scaffold"

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="trellis")
def cli():
    """Trellis static site generator."""


@cli.command()
@click.argument(
    "source",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--dest",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory receiving the output directory (defaults to SOURCE)",
)
@click.option("--theme", help="Theme name (overrides trellis.yaml)")
@click.option("--workers", type=click.IntRange(min=1), help="Pages rendered in parallel")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
def build(
    source: Path | None,
    dest: Path | None,
    theme: str | None,
    workers: int | None,
    verbose: bool,
):
    """Build the site into the output directory."""
    _configure_logging(verbose)
    from .build import build_site

    options: dict = {}
    if theme:
        options["theme"] = theme
    if workers:
        options["build"] = {"workers": workers}

    try:
        result = build_site(source or Path.cwd(), dest, options)
    except (TrellisError, FileNotFoundError) as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        if isinstance(exc, BuildError) and exc.failures:
            for page_id, message in exc.failures:
                click.echo(click.style(f"  Page: {page_id}", fg="yellow"), err=True)
                click.echo(click.style(f"  Error: {message}", fg="white"), err=True)
        elif isinstance(exc, BuildError):
            click.echo(click.style(f"  Page: {exc.source}", fg="yellow"), err=True)
            click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        else:
            click.echo(click.style(f"  Error: {exc}", fg="white"), err=True)
        raise SystemExit(1) from None
    click.echo(f"Built {len(result.written)} pages into {result.output_dir}")


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new Trellis project."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New Trellis site created at {target}")


@cli.command()
def page():
    """Create a new content file interactively."""
    project_root = Path.cwd()
    config = load_config(project_root)
    content_dir = project_root / config["content"]["dir"]
    ext = config["content"]["ext"]

    if not content_dir.exists():
        raise click.ClickException(
            f"No {content_dir.name}/ directory found. Run this command from a Trellis project root."
        )

    section = questionary.select(
        "Select section:",
        choices=_get_content_folders(content_dir),
        style=_questionary_style(),
    ).ask()
    if section is None:
        raise click.Abort()

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    tags = questionary.text("Tags (comma separated):", style=_questionary_style()).ask()
    if tags is None:
        raise click.Abort()

    in_menu = questionary.confirm(
        "Add to the main menu?", default=False, style=_questionary_style()
    ).ask()
    if in_menu is None:
        raise click.Abort()

    target_dir = content_dir if section == ". (root)" else content_dir / section
    slug = urlize(title) or "untitled"
    target_path = target_dir / f"{slug}.{ext}"
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {target_path.relative_to(project_root)}"
        )

    frontmatter: dict = {"title": title}
    tag_list = [tag.strip() for tag in tags.split(",") if tag.strip()]
    if tag_list:
        frontmatter["tags"] = tag_list
    if in_menu:
        frontmatter["menu"] = "main"

    target_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(
        "---\n"
        + yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True)
        + "---\n\n",
        encoding="utf-8",
    )
    click.echo(f"Created {target_path.relative_to(project_root)}")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


def _get_content_folders(content_dir: Path) -> list[str]:
    """Get the sections of a content directory, root option first."""
    folders = sorted(
        path.name
        for path in content_dir.iterdir()
        if path.is_dir() and not path.name.startswith((".", "_"))
    )
    folders.insert(0, ". (root)")
    return folders


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Create the directory structure and files for a new Trellis project.

    Args:
        root: Root directory for the new project.
    """
    for src_path in _SCAFFOLD_DIR.rglob("*"):
        if src_path.is_dir() or src_path.name == "__pycache__":
            continue
        rel_path = src_path.relative_to(_SCAFFOLD_DIR)
        dest_path = root / rel_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)

    _try_git_init(root)


def _try_git_init(root: Path) -> None:
    """Initialize a git repository if git is available."""
    if os.environ.get("TRELLIS_SKIP_GIT_INIT") == "1":
        return
    git_bin = shutil.which("git")
    if not git_bin:
        return
    try:
        subprocess.run(
            [git_bin, "init"],
            cwd=root,
            check=True,
            capture_output=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        # Non-fatal: user can run git init manually
        logger.debug("git init failed in %s: %s", root, exc)
