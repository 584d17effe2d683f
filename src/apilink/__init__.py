"""apilink -- named API resources over httpx, with ``{data, error}`` results.

Register resource URLs once (with ``:name`` placeholders), let the client
attach the ``authorization`` header, and get every call back as a
:class:`~apilink.models.ResponseEnvelope` instead of an exception.

Typical use::

    import apilink

    api = apilink.init(
        base_url="https://api.example.com",
        saved_urls={"users": "/users", "user": "/users/:id"},
        jwt_token_name="API_TOKEN",
    )
    api.update_placeholders({"id": "/42"})
    result = await api.get("user")

Modules:
    api: :class:`ApiClient` facade and the :func:`init` factory.
    resources: URL template resolution and placeholder substitution.
    headers: Per-call header assembly.
    auth: Auth scheme prefixes and token key-value stores.
    client: httpx transport and response normalisation.
    config: Config files, profiles, and precedence resolution.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"

from apilink.api import ApiClient, init  # noqa: E402
from apilink.models import ClientConfig, ResponseEnvelope  # noqa: E402

__all__ = ["ApiClient", "ClientConfig", "ResponseEnvelope", "init", "__version__"]
