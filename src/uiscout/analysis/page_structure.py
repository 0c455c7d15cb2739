"""Page layout and interactive element analysis."""

import asyncio
import logging

from uiscout.browser.page_capability import PageCapability
from uiscout.errors import PageUnavailableError
from uiscout.models.run_models import PageStructure

logger = logging.getLogger(__name__)


class PageStructureAnalyzer:
    """Count structural regions and interactive elements on a page."""

    LAYOUT_SELECTORS = {
        "main_areas": 'main, [role="main"], #main, .main',
        "headers": 'header, [role="banner"], .header',
        "footers": 'footer, [role="contentinfo"], .footer',
        "navs": 'nav, [role="navigation"], .nav',
        "asides": 'aside, [role="complementary"], .sidebar',
    }

    INTERACTIVE_SELECTORS = {
        "forms": "form",
        "buttons": 'button, [role="button"], input[type="button"]',
        "links": "a[href]",
        "inputs": "input, textarea, select",
    }

    def __init__(self, page: PageCapability):
        self.page = page

    async def analyze(self) -> PageStructure:
        """Analyze the page structure.

        Returns:
            Layout and interactive element counts

        Raises:
            PageUnavailableError: If the page went away
        """
        logger.info("Analyzing page structure")

        try:
            title = await self.page.title() or "Unknown"
        except PageUnavailableError:
            raise
        except Exception as e:
            logger.debug(f"Could not read page title: {e}")
            title = "Unknown"

        selectors = {**self.LAYOUT_SELECTORS, **self.INTERACTIVE_SELECTORS}
        counts = await asyncio.gather(
            *(self.page.count(selector) for selector in selectors.values())
        )

        structure = PageStructure(
            title=title,
            url=await self.page.url(),
            **dict(zip(selectors.keys(), counts)),
        )

        logger.info(
            f"Structure: {structure.headers} headers, {structure.navs} navs, "
            f"{structure.main_areas} main areas, {structure.asides} sidebars, "
            f"{structure.footers} footers"
        )
        logger.info(
            f"Interactive: {structure.buttons} buttons, {structure.links} links, "
            f"{structure.inputs} inputs, {structure.forms} forms"
        )
        return structure
