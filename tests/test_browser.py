from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from a11y_crawler import evaluator as evaluator_module
from a11y_crawler.browser import LoadedPage, PlaywrightRenderer
from a11y_crawler.config import CrawlConfig, RuleConfig
from a11y_crawler.evaluator import AxeEvaluator

HTML = """
<html><head><title>Home</title></head>
<body><a href="/x">X</a><a href="#top">Top</a></body></html>
"""


def make_page(response=None, url="https://example.test/"):
    page = MagicMock()
    page.url = url
    page.goto = AsyncMock(return_value=response)
    page.title = AsyncMock(return_value="Home")
    page.content = AsyncMock(return_value=HTML)
    page.wait_for_timeout = AsyncMock()
    page.close = AsyncMock()
    return page


def started_renderer(page, **overrides):
    renderer = PlaywrightRenderer(CrawlConfig(base_url="https://example.test/", **overrides))
    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    renderer._context = context
    return renderer


@pytest.mark.asyncio
async def test_load_without_response_reports_status_zero():
    page = make_page(response=None)
    renderer = started_renderer(page)

    async with renderer.load("https://example.test/", timeout=5.0) as loaded:
        assert loaded.status == 0
        assert loaded.title == "Home"
        assert loaded.final_url == "https://example.test/"
        assert loaded.links == ["https://example.test/x", "https://example.test/#top"]
        assert loaded.handle is page
        page.close.assert_not_awaited()

    page.goto.assert_awaited_once_with("https://example.test/", wait_until="networkidle")
    page.set_default_navigation_timeout.assert_called_once_with(5000.0)
    page.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_load_uses_response_status_and_waits_after_load():
    page = make_page(response=SimpleNamespace(status=404))
    renderer = started_renderer(page, wait_after_load=0.5)

    async with renderer.load("https://example.test/", timeout=5.0) as loaded:
        assert loaded.status == 404

    page.wait_for_timeout.assert_awaited_once_with(500)


@pytest.mark.asyncio
async def test_tab_is_closed_when_evaluation_fails():
    page = make_page()
    renderer = started_renderer(page)

    with pytest.raises(RuntimeError):
        async with renderer.load("https://example.test/", timeout=5.0):
            raise RuntimeError("axe exploded")
    page.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_tab_is_closed_when_navigation_fails():
    page = make_page()
    page.goto.side_effect = TimeoutError("Timeout 5000ms exceeded")
    renderer = started_renderer(page)

    with pytest.raises(TimeoutError):
        async with renderer.load("https://example.test/", timeout=5.0):
            pass
    page.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_load_requires_started_renderer():
    renderer = PlaywrightRenderer(CrawlConfig(base_url="https://example.test/"))
    with pytest.raises(RuntimeError):
        async with renderer.load("https://example.test/", timeout=5.0):
            pass


@pytest.mark.asyncio
async def test_axe_evaluator_passes_rule_options(monkeypatch):
    axe = MagicMock()
    axe.run = AsyncMock(
        return_value=SimpleNamespace(
            response={
                "violations": [{"id": "image-alt"}, {"id": "label"}],
                "incomplete": [{"id": "color-contrast"}],
                "passes": [{"id": "html-has-lang"}],
                "inapplicable": [{"id": "video-caption"}],
            }
        )
    )
    monkeypatch.setattr(evaluator_module, "Axe", lambda: axe)
    page_handle = object()
    loaded = LoadedPage(
        url="https://example.test/",
        final_url="https://example.test/",
        status=200,
        title="Home",
        handle=page_handle,
    )
    rules = RuleConfig(exclude_rules=["region"], best_practices=True)

    result = await AxeEvaluator().evaluate(loaded, rules, include_incomplete=True)

    axe.run.assert_awaited_once_with(
        page_handle, options=rules.to_axe_options(include_incomplete=True)
    )
    options = axe.run.await_args.kwargs["options"]
    assert options["runOnly"] == {"type": "tag", "values": ["wcag2a", "wcag2aa", "best-practice"]}
    assert options["rules"] == {"region": {"enabled": False}}
    assert [r["id"] for r in result.violations] == ["image-alt", "label"]
    assert [r["id"] for r in result.incomplete] == ["color-contrast"]
    assert [r["id"] for r in result.passes] == ["html-has-lang"]


def test_axe_response_with_missing_categories():
    result = evaluator_module.EvaluationResult.from_axe_response({"violations": None})
    assert result.violations == []
    assert result.incomplete == []
    assert result.passes == []
