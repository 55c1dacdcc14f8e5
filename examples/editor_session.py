"""Scripted editing session that autosaves to a running content service.

Start the service first (``python examples/app.py``), then run:
    python examples/editor_session.py

The script builds a small page, edits it in a quick burst and lets the
autosave coordinator send a single PUT once the edits go quiet.
"""

from __future__ import annotations

import asyncio

import structlog

from sitebuildr_py import EditorSession
from sitebuildr_py.config import EditorSettings
from sitebuildr_py.core.logging import configure_logging
from sitebuildr_py.core.models import Element, Position
from sitebuildr_py.core.types import ElementType
from sitebuildr_py.services import AutosaveCoordinator, build_layers
from sitebuildr_py.storage import HttpDocumentStore

logger = structlog.get_logger(__name__)


async def main() -> None:
    configure_logging(debug=True)
    settings = EditorSettings.from_env()

    async with HttpDocumentStore.from_settings(settings) as store:
        autosave = AutosaveCoordinator(store, "demo-site", delay=settings.autosave_delay)
        autosave.add_listener(lambda status: logger.info("Save status", status=status))
        session = EditorSession(settings=settings, autosave=autosave)

        section = session.add_element(Element(ElementType.SECTION, props={"name": "Hero"}))
        heading = session.add_element(
            Element(ElementType.HEADING, props={"text": "خوش آمدید"}, style={"fontSize": "32px"}),
            parent_id=section.id,
        )
        button = session.add_element(
            Element(ElementType.BUTTON, props={"text": "Start"}, position=Position(x=123, y=456)),
            parent_id=section.id,
        )
        session.set_style(heading.id, {"fontSize": "24px"}, "tablet")
        session.set_style(heading.id, {"fontSize": "18px"}, "mobile")
        session.set_language("ur")

        session.select(heading.id)
        session.select(button.id, additive=True)
        session.handle_shortcut("ctrl+g")

        for row in build_layers(session.document):
            logger.info("Layer", name=row.name, depth=row.depth, z_index=row.z_index)

        status = await autosave.wait_settled()
        logger.info("Autosave settled", status=status, error=autosave.last_error)
        await autosave.aclose()


if __name__ == "__main__":
    asyncio.run(main())
