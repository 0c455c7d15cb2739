"""Tests for DiscoveryAggregator: fan-out, merge, dynamic and essentials passes."""

import pytest
from unittest.mock import AsyncMock, Mock

from uiscout.discovery.aggregator import DiscoveryAggregator
from uiscout.discovery.scanners import ButtonScanner, ElementScanner, FeatureCategory
from uiscout.errors import PageUnavailableError
from uiscout.models.feature_models import DiscoveredFeature, FeatureType


def _feature(name, selector, feature_type=FeatureType.OTHER):
    return DiscoveredFeature(name=name, type=feature_type, selector=selector)


def _failing_scanner(error):
    scanner = Mock(spec=ElementScanner)
    scanner.scan = AsyncMock(side_effect=error)
    return scanner


class TestDiscoverAll:
    """Tests for the full discovery fan-out."""

    @pytest.mark.asyncio
    async def test_button_and_email_input(self, el, make_page, config):
        page = make_page(
            el("button", text="Submit", id="submit"),
            el("input", type="email", id="email"),
        )
        aggregator = DiscoveryAggregator(page, config)

        features = await aggregator.discover_all()

        assert [(f.type, f.selector) for f in features] == [
            (FeatureType.BUTTON, "#submit"),
            (FeatureType.INPUT, "#email"),
        ]
        assert features[1].input_type == "email"

    @pytest.mark.asyncio
    async def test_contested_selector_keeps_earlier_category(self, el, make_page, config):
        page = make_page(el("button", text="Open", class_="panel"))
        aggregator = DiscoveryAggregator(page, config)

        features = await aggregator.discover_all()

        assert len(features) == 1
        assert features[0].selector == ".panel"
        assert features[0].type == FeatureType.BUTTON

    @pytest.mark.asyncio
    async def test_scanner_failure_aborts_by_default(self, el, make_page, config):
        page = make_page(el("button", text="Save", id="save"))
        scanners = [ButtonScanner(page, config), _failing_scanner(RuntimeError("boom"))]
        aggregator = DiscoveryAggregator(page, config, scanners=scanners)

        with pytest.raises(RuntimeError, match="boom"):
            await aggregator.discover_all()

    @pytest.mark.asyncio
    async def test_scanner_failure_isolated_when_configured(self, el, make_page, config):
        config.isolate_scanner_failures = True
        page = make_page(el("button", text="Save", id="save"))
        scanners = [ButtonScanner(page, config), _failing_scanner(RuntimeError("boom"))]
        aggregator = DiscoveryAggregator(page, config, scanners=scanners)

        features = await aggregator.discover_all()

        assert [f.selector for f in features] == ["#save"]

    @pytest.mark.asyncio
    async def test_closed_page_propagates(self, el, make_page, config):
        page = make_page(el("button", text="Save", id="save"))
        page.closed = True
        aggregator = DiscoveryAggregator(page, config)

        with pytest.raises(PageUnavailableError):
            await aggregator.discover_all()


class TestMerge:
    """Tests for the precedence merge."""

    def test_precedence_not_insertion_order(self):
        by_category = {
            FeatureCategory.TABS: [_feature("Tabs", "#x", FeatureType.TAB)],
            FeatureCategory.BUTTONS: [_feature("Button", "#x", FeatureType.BUTTON)],
        }

        merged = DiscoveryAggregator.merge(by_category)

        assert [f.type for f in merged] == [FeatureType.BUTTON]

    def test_incomplete_features_dropped(self):
        by_category = {
            FeatureCategory.PANELS: [
                _feature("", "#nameless", FeatureType.PANEL),
                _feature("Panel", "#panel", FeatureType.PANEL),
            ],
        }

        merged = DiscoveryAggregator.merge(by_category)

        assert [f.selector for f in merged] == ["#panel"]

    def test_selectors_unique(self):
        by_category = {
            FeatureCategory.BUTTONS: [_feature("A", "#a"), _feature("B", "#b")],
            FeatureCategory.MENUS: [_feature("A2", "#a"), _feature("C", "#c")],
            FeatureCategory.CUSTOM_COMPONENTS: [_feature("B2", "#b")],
        }

        merged = DiscoveryAggregator.merge(by_category)

        assert [f.name for f in merged] == ["A", "B", "C"]


class TestDiscoverDynamic:
    """Tests for hover-triggered discovery."""

    @pytest.mark.asyncio
    async def test_hover_reveals_submenu(self, el, make_page, config):
        submenu = el("ul", el("li", text="Widgets"), class_="submenu", visible=False)
        nav = el("nav", el("a", text="Products", href="#"), id="main-nav", reveals=[submenu])
        page = make_page(nav, submenu)
        aggregator = DiscoveryAggregator(page, config)
        features = await aggregator.discover_all()

        dynamic = await aggregator.discover_dynamic(features)

        assert len(dynamic) == 1
        assert dynamic[0].selector == ".submenu"
        assert dynamic[0].name == "Widgets"
        assert dynamic[0].type == FeatureType.OTHER
        assert dynamic[0].attributes["revealed_by"] == ".submenu:visible"
        assert dynamic[0].actions == ["click", "screenshot"]
        assert ("hover", nav, None) in page.interactions

    @pytest.mark.asyncio
    async def test_known_selectors_not_repeated(self, el, make_page, config):
        page = make_page(
            el("nav", el("a", text="Home", href="/"), id="main-nav"),
            el("ul", el("li", text="Item"), class_="dropdown-menu"),
        )
        aggregator = DiscoveryAggregator(page, config)
        features = await aggregator.discover_all()

        dynamic = await aggregator.discover_dynamic(features)

        assert ".dropdown-menu" in {f.selector for f in features}
        assert dynamic == []

    @pytest.mark.asyncio
    async def test_hover_limit(self, el, make_page, config):
        config.dynamic_hover_limit = 0
        nav = el("nav", el("a", text="Home", href="/"), id="main-nav")
        page = make_page(nav)
        aggregator = DiscoveryAggregator(page, config)
        features = await aggregator.discover_all()

        await aggregator.discover_dynamic(features)

        assert page.waits == []


class TestDiscoverEssentials:
    """Tests for the essentials pass."""

    @pytest.mark.asyncio
    async def test_confidence_and_order(self, el, make_page, config):
        page = make_page(
            el("a", text="Docs", href="/docs"),
            el("select", el("option", text="Newest"), id="sort"),
            el("input", type="search", id="q"),
            el("button", text="Buy", data_testid="buy"),
        )
        aggregator = DiscoveryAggregator(page, config)

        features = await aggregator.discover_essentials()

        assert [(f.selector, f.confidence) for f in features] == [
            ('[data-testid="buy"]', 1.0),
            ("#q", 0.9),
            ("#sort", 0.9),
            ('a:has-text("Docs")', 0.7),
        ]
        assert features[1].input_type == "search"
        assert features[1].actions == ["fill", "clear", "focus", "blur"]
        assert features[2].type == FeatureType.DROPDOWN
        assert features[3].name == "Docs"

    @pytest.mark.asyncio
    async def test_per_selector_cap(self, el, make_page, config):
        config.essentials_per_selector = 2
        page = make_page(
            el("button", text="One", id="b1"),
            el("button", text="Two", id="b2"),
            el("button", text="Three", id="b3"),
        )
        aggregator = DiscoveryAggregator(page, config)

        features = await aggregator.discover_essentials()

        assert [f.selector for f in features] == ["#b1", "#b2"]
