# -*- coding: utf-8 -*-

from __future__ import annotations
import logging

from flask import Flask, Response, current_app, jsonify, request

from whoami.config import Config
from whoami.netinfo import resolve_real_ip
from whoami.render import RenderError, render_structured, render_text
from whoami.report import build_report, remote_addr_of, rfc3339_now
from whoami.version import VERSION

logger = logging.getLogger(__name__)

# every verb the report should answer, WebDAV included
ALL_METHODS = [
    "GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE", "CONNECT",
    "PROPFIND", "PROPPATCH", "MKCOL", "COPY", "MOVE", "LOCK", "UNLOCK", "REPORT",
    "SEARCH", "PURGE",
]
CONTENT_TYPE_JSON = "application/json"

# ----------------------------- Helpers -----------------------------

def _config() -> Config:
    return current_app.config["WHOAMI"]

def _log_request() -> None:
    if not _config().verbose:
        return
    real_ip = resolve_real_ip(request.headers, remote_addr_of(request))
    logger.info("%s %s from %s", request.method, request.path, real_ip)

# ----------------------------- Endpoints -----------------------------

def root(path: str = "") -> Response:
    info = build_report(request, _config())
    body = render_text(info).encode("utf-8", errors="replace")
    return Response(body, mimetype="text/plain")

def api() -> Response:
    info = build_report(request, _config())
    try:
        body = render_structured(info)
    except RenderError as exc:
        if _config().verbose:
            logger.error("JSON encoding error: %s", exc)
        return Response("Failed to encode JSON\n", status=500, mimetype="text/plain")
    return Response(body, mimetype=CONTENT_TYPE_JSON)

def health() -> Response:
    return jsonify({"status": "ok", "time": rfc3339_now(), "version": VERSION})

# ----------------------------- Factory -----------------------------

def create_app(config: Config) -> Flask:
    app = Flask(__name__)
    app.config["WHOAMI"] = config
    app.before_request(_log_request)
    app.add_url_rule("/", "root", root, methods=ALL_METHODS)
    app.add_url_rule("/<path:path>", "root_catchall", root, methods=ALL_METHODS)
    app.add_url_rule("/api", "api", api, methods=ALL_METHODS)
    app.add_url_rule("/health", "health", health, methods=ALL_METHODS)
    return app
