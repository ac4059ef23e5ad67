"""Tests for the compiled template cache and staged rendering."""

import logging
from datetime import UTC, datetime
from pathlib import Path

import pytest

from snippetbox.app import App
from snippetbox.config import PACKAGE_DIR, AppConfig
from snippetbox.errors import ConfigurationError
from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.templating.cache import build_template_cache
from snippetbox.templating.filters import human_date
from snippetbox.templating.render import TemplateData, new_template_data
from snippetbox.testing import TestClient

BASE = (
    "<html><title>{% block title %}{% endblock %}</title>"
    "{% include 'partials/nav.html' %}"
    "<main>{% block main %}{% endblock %}</main>"
    "<footer>{{ current_year }}</footer></html>"
)


def _write_templates(root: Path, pages: dict[str, str], base: str | None = BASE) -> Path:
    (root / "pages").mkdir(parents=True)
    (root / "partials").mkdir()
    (root / "partials" / "nav.html").write_text("<nav>nav</nav>")
    if base is not None:
        (root / "base.html").write_text(base)
    for name, source in pages.items():
        (root / "pages" / name).write_text(source)
    return root


def _page(body: str) -> str:
    return "{% extends 'base.html' %}{% block title %}T{% endblock %}{% block main %}" + body + "{% endblock %}"


class TestBuildTemplateCache:
    def test_bundled_templates_compile(self) -> None:
        cache = build_template_cache(PACKAGE_DIR / "ui" / "html")
        assert set(cache) == {"home.html", "view.html", "create.html"}

    def test_keyed_by_page_file_name(self, tmp_path) -> None:
        root = _write_templates(tmp_path, {"home.html": _page("hi"), "about.html": _page("about")})
        cache = build_template_cache(root)
        assert sorted(cache) == ["about.html", "home.html"]

    def test_read_only(self, tmp_path) -> None:
        cache = build_template_cache(_write_templates(tmp_path, {"home.html": _page("hi")}))
        with pytest.raises(TypeError):
            cache["evil.html"] = cache["home.html"]  # type: ignore[index]

    def test_missing_base_layout(self, tmp_path) -> None:
        root = _write_templates(tmp_path, {"home.html": _page("hi")}, base=None)
        with pytest.raises(ConfigurationError, match="base.html"):
            build_template_cache(root)

    def test_no_pages(self, tmp_path) -> None:
        root = _write_templates(tmp_path, {})
        with pytest.raises(ConfigurationError, match="No page templates"):
            build_template_cache(root)

    def test_syntax_error(self, tmp_path) -> None:
        root = _write_templates(tmp_path, {"home.html": _page("{% if %}")})
        with pytest.raises(ConfigurationError, match="compilation failed"):
            build_template_cache(root)

    def test_reference_to_missing_template(self, tmp_path) -> None:
        root = _write_templates(tmp_path, {"home.html": _page("{% include 'partials/gone.html' %}")})
        with pytest.raises(ConfigurationError, match="partials/gone.html"):
            build_template_cache(root)

    def test_app_refuses_to_start_with_broken_templates(self, tmp_path) -> None:
        root = _write_templates(tmp_path, {"home.html": _page("{% endfor %}")})
        app = App(AppConfig(template_dir=root, static_dir=None))
        with pytest.raises(ConfigurationError):
            app.templates


class TestFilters:
    def test_human_date(self) -> None:
        assert human_date(datetime(2024, 3, 17, 10, 15, tzinfo=UTC)) == "17 Mar 2024 at 10:15"

    def test_human_date_naive_is_utc(self) -> None:
        assert human_date(datetime(2024, 3, 17, 10, 15)) == "17 Mar 2024 at 10:15"

    def test_human_date_none(self) -> None:
        assert human_date(None) == ""


def _render_app(root: Path) -> App:
    app = App(AppConfig(template_dir=root, static_dir=None))

    @app.route("/{page}", methods=["GET"])
    async def show(request: Request) -> Response:
        data = new_template_data(request)
        data.flash = request.query.get("flash") or ""
        return app.render(request, request.path_params["page"], data)

    @app.template_global()
    def explode() -> str:
        raise RuntimeError("render failed mid-page")

    return app


class TestRender:
    async def test_renders_full_page(self, tmp_path) -> None:
        app = _render_app(_write_templates(tmp_path, {"home.html": _page("<p>{{ flash }}</p>")}))
        async with TestClient(app) as client:
            response = await client.get("/home.html?flash=saved")
        assert response.status == 200
        assert response.content_type == "text/html; charset=utf-8"
        assert "<nav>nav</nav>" in response.text
        assert "<p>saved</p>" in response.text
        assert f"<footer>{datetime.now(UTC).year}</footer>" in response.text

    async def test_rendering_is_idempotent(self, tmp_path) -> None:
        app = _render_app(_write_templates(tmp_path, {"home.html": _page("{{ flash }}")}))
        async with TestClient(app) as client:
            first = await client.get("/home.html?flash=x")
            second = await client.get("/home.html?flash=x")
        assert first.body == second.body

    async def test_autoescape(self, tmp_path) -> None:
        app = _render_app(_write_templates(tmp_path, {"home.html": _page("{{ flash }}")}))
        async with TestClient(app) as client:
            response = await client.get("/home.html?flash=%3Cscript%3E")
        assert "<script>" not in response.text
        assert "&lt;script&gt;" in response.text

    async def test_missing_page_is_500_not_404(self, tmp_path, caplog) -> None:
        app = _render_app(_write_templates(tmp_path, {"home.html": _page("hi")}))
        async with TestClient(app) as client:
            with caplog.at_level(logging.ERROR):
                response = await client.get("/nope.html")
        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert any("nope.html" in r.getMessage() for r in caplog.records)

    async def test_failure_mid_render_sends_only_the_500(self, tmp_path) -> None:
        root = _write_templates(tmp_path, {"broken.html": _page("<p>partial output</p>{{ explode() }}")})
        app = _render_app(root)
        await app.startup()

        scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": "GET",
            "path": "/broken.html",
            "raw_path": b"/broken.html",
            "query_string": b"",
            "headers": [],
            "client": ("127.0.0.1", 1234),
        }
        sent: list[dict] = []

        async def receive() -> dict:
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message: dict) -> None:
            sent.append(message)

        await app(scope, receive, send)
        await app.shutdown()

        assert [m["type"] for m in sent] == ["http.response.start", "http.response.body"]
        assert sent[0]["status"] == 500
        assert sent[1]["body"] == b"Internal Server Error"

    async def test_undefined_payload_field_is_500(self, tmp_path) -> None:
        app = _render_app(_write_templates(tmp_path, {"home.html": _page("{{ no_such_field }}")}))
        async with TestClient(app) as client:
            response = await client.get("/home.html")
        assert response.status == 500

    def test_template_data_context(self) -> None:
        data = TemplateData(current_year=2024, flash="hi")
        context = data.context()
        assert context["current_year"] == 2024
        assert context["flash"] == "hi"
        assert context["snippets"] == []
        assert context["snippet"] is None
