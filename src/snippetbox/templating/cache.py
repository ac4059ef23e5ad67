"""Compiled template cache.

Every page under ``pages/`` is compiled at startup together with the
shared ``base.html`` layout and every file under ``partials/``. The
result is a read-only mapping keyed by page file name::

    templates = build_template_cache(Path("ui/html"))
    templates["home.html"]  # jinja2.Template

A template that fails to parse, or that references a template that does
not exist, is a deployment defect: ``ConfigurationError`` is raised and
the app does not start.
"""

from collections.abc import Callable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateError, meta

from snippetbox.errors import ConfigurationError
from snippetbox.templating.filters import BUILTIN_FILTERS

BASE_LAYOUT = "base.html"
PAGES_DIR = "pages"
PARTIALS_DIR = "partials"


def create_environment(
    template_dir: Path,
    filters: Mapping[str, Callable[..., Any]] | None = None,
    globals_: Mapping[str, Any] | None = None,
) -> Environment:
    """Create the Jinja2 environment used for every page.

    Autoescaping is always on. ``StrictUndefined`` turns any reference to
    a missing payload field into an error instead of empty output.
    ``auto_reload`` is off: the compiled set never changes after startup.
    """
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=True,
        undefined=StrictUndefined,
        auto_reload=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters.update(BUILTIN_FILTERS)
    if filters:
        env.filters.update(filters)
    if globals_:
        env.globals.update(globals_)
    return env


def _check_references(env: Environment, name: str) -> None:
    """Raise if *name* extends or includes a template that does not exist."""
    source, _, _ = env.loader.get_source(env, name)  # type: ignore[union-attr]
    known = set(env.list_templates())
    for ref in meta.find_referenced_templates(env.parse(source)):
        # None means a dynamic name that can only be resolved at render time
        if ref is not None and ref not in known:
            msg = f"Template {name!r} references missing template {ref!r}"
            raise ConfigurationError(msg)


def build_template_cache(
    template_dir: str | Path,
    *,
    filters: Mapping[str, Callable[..., Any]] | None = None,
    globals_: Mapping[str, Any] | None = None,
) -> Mapping[str, Template]:
    """Compile every page template once and return a read-only mapping.

    Raises ``ConfigurationError`` when the directory, the base layout, or
    all pages are missing, or when any template fails to compile.
    """
    root = Path(template_dir)
    if not (root / BASE_LAYOUT).is_file():
        msg = f"Base layout {BASE_LAYOUT!r} not found in {root}"
        raise ConfigurationError(msg)

    pages = sorted((root / PAGES_DIR).glob("*.html"))
    if not pages:
        msg = f"No page templates found in {root / PAGES_DIR}"
        raise ConfigurationError(msg)

    partials = sorted((root / PARTIALS_DIR).glob("*.html"))
    env = create_environment(root, filters, globals_)

    cache: dict[str, Template] = {}
    try:
        shared = [BASE_LAYOUT, *(f"{PARTIALS_DIR}/{p.name}" for p in partials)]
        for name in shared:
            _check_references(env, name)
            env.get_template(name)
        for page in pages:
            name = f"{PAGES_DIR}/{page.name}"
            _check_references(env, name)
            cache[page.name] = env.get_template(name)
    except TemplateError as exc:
        msg = f"Template compilation failed: {exc}"
        raise ConfigurationError(msg) from exc

    return MappingProxyType(cache)
