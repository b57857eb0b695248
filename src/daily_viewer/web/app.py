"""Flask application factory."""

import os

from flask import Flask

from ..config import ConfigProvider
from ..rendering.markdown_renderer import MarkdownRenderer
from ..storage.vault import VaultStore
from ..view.daily_view import DailyView
from ..view.navigator import NavigationQueue

ICONS = {
    "refresh-cw": "⟳",
    "link": "\U0001f517",
}


def create_app(
    config_path: str = "config.yaml", provider: ConfigProvider | None = None
) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(
        __name__,
        template_folder="templates",
    )
    app.config["SECRET_KEY"] = os.environ.get("DAILY_VIEWER_SECRET_KEY") or os.urandom(16)

    # Load config and wire the view's collaborators
    provider = provider or ConfigProvider.from_yaml(config_path)
    store = VaultStore(provider.config.vault_path, resource_base="/resource")
    navigator = NavigationQueue()
    app.config["CONFIG_PROVIDER"] = provider
    app.config["STORE"] = store
    app.config["NAVIGATOR"] = navigator
    app.config["DAILY_VIEW"] = DailyView(store, MarkdownRenderer(), navigator, provider)

    # Register routes
    from . import routes

    app.register_blueprint(routes.bp)

    # Register custom Jinja filters
    @app.template_filter("icon")
    def icon(name: str | None) -> str:
        """Glyph for an icon name, falling back to the name itself."""
        if not name:
            return ""
        return ICONS.get(name, name)

    return app
