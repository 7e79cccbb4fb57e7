"""Trellis static site generator.

Trellis turns a directory of content files into a content graph (pages,
section indexes, taxonomies, menus) and renders every page through Jinja2
layouts picked by a fallback chain, producing a deployable site tree.

The main entry points are Builder and build_site in the build module, and
the ``trellis`` command defined in the cli module.
"""

__all__ = ["__version__"]
__version__ = "1.0.0"
