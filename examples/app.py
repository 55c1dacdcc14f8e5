"""Minimal example serving the content API with Litestar.

The application will:
    - Store documents in an InMemoryDocumentStore
    - Mount the content API at /api/v1/content
    - Provide the store as ``documents`` to custom route handlers

Running the Application:
    python examples/app.py

Then visit:
    - http://127.0.0.1:8000/schema - OpenAPI documentation
    - http://127.0.0.1:8000/health - Health check

Example API Usage:
    # Save a document
    curl -X PUT http://127.0.0.1:8000/api/v1/content/my-site \\
        -H "Content-Type: application/json" \\
        -d '{"elements": [{"id": "h1", "type": "heading", "props": {"text": "Hello"}}]}'

    # Load it back
    curl http://127.0.0.1:8000/api/v1/content/my-site

    # List saved websites
    curl http://127.0.0.1:8000/websites
"""

from __future__ import annotations

from typing import Annotated

from litestar import Litestar, get
from litestar.params import Dependency

from sitebuildr_py import SitebuildrConfig, SitebuildrPlugin
from sitebuildr_py.core.logging import configure_logging
from sitebuildr_py.storage import InMemoryDocumentStore


@get("/websites")
async def list_websites(documents: Annotated[InMemoryDocumentStore, Dependency(skip_validation=True)]) -> list[str]:
    """List the websites with a saved document, most recent first."""
    return await documents.list_websites()


configure_logging(debug=True)

app = Litestar(
    route_handlers=[list_websites],
    plugins=[
        SitebuildrPlugin(
            SitebuildrConfig(
                store=InMemoryDocumentStore(),
                api_path="/api/v1",
                # Also inject the store as "documents"
                dependency_key="documents",
            )
        )
    ],
    debug=True,
)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="127.0.0.1",
        port=8000,
        log_level="info",
    )
