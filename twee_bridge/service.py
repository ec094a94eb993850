"""
HTTP channel for the story map editor.

Endpoints:
- GET  /passages                      Broadcast payload: every passage with its links
- POST /passages                      Apply a batch of header updates
- GET  /passages/<origin>/<name>      Body and links of one passage
- GET  /health                        Liveness check
"""

from typing import Any, List, Optional, Tuple

import jsonschema
from flask import Flask, jsonify, request

from twee_bridge.config import Settings
from twee_bridge.errors import DocumentStoreError, PassageNotFoundError
from twee_bridge.extract import extract_body
from twee_bridge.links import scan_links
from twee_bridge.models import PassageDescriptor, PositionUpdate
from twee_bridge.registry import Registry
from twee_bridge.store import DocumentStore
from twee_bridge.sync import send_passages_to_client, update_passages

VECTOR_SCHEMA = {
    "type": "object",
    "required": ["x", "y"],
    "properties": {
        "x": {"type": "number"},
        "y": {"type": "number"},
    },
}

UPDATE_BATCH_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["name", "origin", "position", "size"],
        "properties": {
            "name": {"type": "string", "minLength": 1},
            "origin": {"type": "string", "minLength": 1},
            "position": VECTOR_SCHEMA,
            "size": VECTOR_SCHEMA,
            "tags": {"type": "array", "items": {"type": "string"}},
        },
    },
}

PASSAGES_PAYLOAD_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["origin", "name", "tags", "meta", "linksToNames"],
        "properties": {
            "origin": {"type": "string"},
            "name": {"type": "string"},
            "tags": {"type": "array", "items": {"type": "string"}},
            "meta": {"type": "object"},
            "linksToNames": {"type": "array", "items": {"type": "string"}},
        },
    },
}


class HttpChannel:
    """Channel that keeps emitted events so a request handler can return them."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []

    def emit(self, event: str, payload: Any) -> None:
        self.events.append((event, payload))


def create_app(registry: Registry, store: DocumentStore,
               settings: Optional[Settings] = None) -> Flask:
    """Create the Flask app serving `registry` and `store`."""
    settings = settings or Settings()
    app = Flask(__name__)

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok"})

    @app.route('/passages', methods=['GET'])
    def get_passages():
        channel = HttpChannel()
        try:
            send_passages_to_client(registry, store, channel)
        except PassageNotFoundError as e:
            app.logger.error(f"Stale passage registry: {e}")
            return jsonify({"error": str(e)}), 409
        except DocumentStoreError as e:
            app.logger.error(f"Unknown document in passage registry: {e}")
            return jsonify({"error": str(e)}), 404
        event, payload = channel.events[-1]
        return jsonify({"event": event, "passages": payload})

    @app.route('/passages', methods=['POST'])
    def post_passages():
        payload = request.get_json(silent=True)
        if payload is None:
            return jsonify({"error": "Expected a JSON body"}), 400
        try:
            jsonschema.validate(instance=payload, schema=UPDATE_BATCH_SCHEMA)
        except jsonschema.ValidationError as e:
            app.logger.warning(f"Rejected update batch: {e.message}")
            return jsonify({"error": e.message}), 400

        updates = [PositionUpdate.from_dict(item) for item in payload]
        try:
            origins = update_passages(updates, store, settings.default_size)
        except DocumentStoreError as e:
            app.logger.error(f"Error updating passages: {e}")
            return jsonify({"error": str(e)}), 404
        app.logger.info(f"Applied {len(updates)} update(s) to {len(origins)} document(s)")
        return jsonify({"updated": origins})

    @app.route('/passages/<path:origin>/<name>', methods=['GET'])
    def get_passage(origin: str, name: str):
        passage = PassageDescriptor(name=name, origin=origin)
        try:
            body = extract_body(store.open(origin), passage)
        except (PassageNotFoundError, DocumentStoreError) as e:
            return jsonify({"error": str(e)}), 404
        return jsonify({
            "name": name,
            "origin": origin,
            "body": body,
            "linksToNames": scan_links(body),
        })

    return app
