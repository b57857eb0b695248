"""Flask route handlers."""

import asyncio
from datetime import datetime

from flask import (
    Blueprint,
    abort,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    send_from_directory,
    url_for,
)

from ..config import ConfigProvider
from ..matching.matcher import match
from ..matching.pattern import DatePattern
from ..storage.models import SortDirection
from ..storage.vault import VaultStore
from ..view.daily_view import DailyView, ViewState
from ..view.navigator import NavigationQueue, NavigationRequest

bp = Blueprint("main", __name__)

SORT_LABELS = {
    SortDirection.DESCENDING: "Newest First",
    SortDirection.ASCENDING: "Oldest First",
}


def get_view() -> DailyView:
    return current_app.config["DAILY_VIEW"]


def get_store() -> VaultStore:
    return current_app.config["STORE"]


def get_navigator() -> NavigationQueue:
    return current_app.config["NAVIGATOR"]


def get_provider() -> ConfigProvider:
    return current_app.config["CONFIG_PROVIDER"]


def navigation_url(nav: NavigationRequest) -> str:
    """Translate a navigation request into a page of this app."""
    if nav.tag is not None:
        return url_for("main.tag_search", name=nav.tag)

    extension = get_provider().config.extension
    document = get_store().resolve_link(nav.identifier, nav.source_context, extension)
    if document is None:
        abort(404)
    if document.extension == extension:
        return url_for("main.note", path=document.path)
    return url_for("main.resource", path=document.path)


@bp.route("/")
def index():
    """The daily view, opened on first visit."""
    view = get_view()
    if view.state is ViewState.CLOSED:
        asyncio.run(view.open())
    return render_template("view.html", view=view, settings=get_provider().config)


@bp.route("/reload", methods=["POST"])
def reload():
    view = get_view()
    if view.state is ViewState.CLOSED:
        asyncio.run(view.open())
    else:
        asyncio.run(view.reload())
    return redirect(url_for("main.index"))


@bp.route("/click/<int:region_id>", methods=["GET", "POST"])
def click(region_id: int):
    """Run a region's click handler and follow any navigation it requested."""
    view = get_view()
    region = view.root.find(region_id) if view.root else None
    if region is None or not region.clickable:
        abort(404)

    asyncio.run(region.click())

    nav = get_navigator().pop()
    if nav is None:
        return redirect(url_for("main.index"))
    return redirect(navigation_url(nav))


@bp.route("/note/<path:path>")
def note(path: str):
    """Source of a single note."""
    store = get_store()
    document = store.get_document(path)
    if document is None:
        abort(404)

    content = asyncio.run(store.read_content(document))
    key = match(document.basename, get_provider().config.pattern)
    return render_template("note.html", document=document, content=content, key=key)


@bp.route("/tag/<path:name>")
def tag_search(name: str):
    """Notes containing a tag."""
    extension = get_provider().config.extension
    results = asyncio.run(get_store().find_tag(name, extension))
    return render_template("tags.html", tag=name, results=results)


@bp.route("/resource/<path:path>")
def resource(path: str):
    """Serve an attachment from the vault."""
    return send_from_directory(get_store().vault_path.resolve(), path)


@bp.route("/settings", methods=["GET", "POST"])
def settings():
    """Sort order and date format settings."""
    provider = get_provider()

    if request.method == "POST":
        try:
            asyncio.run(
                provider.update(
                    date_format=request.form.get("date_format") or None,
                    sort_order=request.form.get("sort_order") or None,
                )
            )
        except ValueError as e:
            flash(str(e), "error")
        else:
            flash("Settings saved.", "success")
        return redirect(url_for("main.settings"))

    cfg = provider.config
    return render_template(
        "settings.html",
        settings=cfg,
        sort_labels=SORT_LABELS,
        example=DatePattern(cfg.date_format).format(datetime.now()),
    )
