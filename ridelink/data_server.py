"""JSON data server backing the RideLink services."""

import json
import logging
import os
import threading

from flask import Flask, jsonify, request
from flask_cors import CORS

from ridelink import config

logger = logging.getLogger(__name__)


def empty_db():
    """Database layout with every known collection present."""
    return {name: [] for name in config.COLLECTIONS}


def init_db(db_file: str, reset: bool = False) -> None:
    """Create the database file if missing, or wipe it when reset is set."""
    directory = os.path.dirname(db_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    if reset or not os.path.exists(db_file):
        with open(db_file, 'w') as f:
            json.dump(empty_db(), f, indent=2)


def create_app(db_file: str = None) -> Flask:
    """
    Build the data server.

    Collections live in a single JSON file. Every read-modify-write of that
    file happens under one lock, so version checks and writes are atomic.
    """
    db_file = db_file or config.DB_FILE
    init_db(db_file)

    app = Flask(__name__)
    CORS(app)
    lock = threading.Lock()

    def read_db():
        with open(db_file, 'r') as f:
            return json.load(f)

    def write_db(data):
        with open(db_file, 'w') as f:
            json.dump(data, f, indent=2)

    def find_index(items, item_id):
        for i, item in enumerate(items):
            if str(item.get('id')) == str(item_id):
                return i
        return None

    def next_id(items):
        numeric = [item['id'] for item in items if isinstance(item.get('id'), int)]
        return max(numeric, default=0) + 1

    @app.route('/')
    def get_root():
        """Get the entire database."""
        with lock:
            return jsonify(read_db())

    @app.route('/<collection>', methods=['GET', 'POST'])
    def manage_collection(collection):
        """Get all items or add a new item to a collection."""
        with lock:
            db = read_db()

            if request.method == 'GET':
                if collection not in db:
                    return jsonify({"error": f"Collection '{collection}' not found"}), 404
                return jsonify(db[collection])

            items = db.setdefault(collection, [])
            new_item = request.get_json()

            if new_item.get('id') is None:
                new_item['id'] = next_id(items)
            elif find_index(items, new_item['id']) is not None:
                return jsonify({"error": f"Item with ID '{new_item['id']}' already exists"}), 409

            new_item['version'] = 1
            items.append(new_item)
            write_db(db)
            return jsonify(new_item), 201

    @app.route('/<collection>/<item_id>', methods=['GET', 'PUT', 'DELETE'])
    def manage_item(collection, item_id):
        """Get, update or delete a specific item."""
        with lock:
            db = read_db()

            if collection not in db:
                return jsonify({"error": f"Collection '{collection}' not found"}), 404

            item_index = find_index(db[collection], item_id)
            if item_index is None:
                return jsonify({"error": f"Item with ID '{item_id}' not found in '{collection}'"}), 404

            if request.method == 'GET':
                return jsonify(db[collection][item_index])

            if request.method == 'DELETE':
                deleted_item = db[collection].pop(item_index)
                write_db(db)
                return jsonify(deleted_item)

            current = db[collection][item_index]
            expected = request.headers.get('If-Match')
            if expected is not None and str(current.get('version')) != expected:
                logger.info(f"Rejected stale write to {collection}/{item_id}")
                return jsonify({"error": "Version mismatch", "version": current.get('version')}), 409

            updated_item = request.get_json()
            updated_item['id'] = current['id']
            updated_item['version'] = (current.get('version') or 0) + 1
            db[collection][item_index] = updated_item
            write_db(db)
            return jsonify(updated_item)

    @app.route('/<collection>/query', methods=['GET'])
    def query_collection(collection):
        """Query items in a collection based on parameters."""
        with lock:
            db = read_db()

        if collection not in db:
            return jsonify({"error": f"Collection '{collection}' not found"}), 404

        params = request.args
        filtered_items = []
        for item in db[collection]:
            match = True
            for key, value in params.items():
                if key not in item or str(item[key]) != value:
                    match = False
                    break
            if match:
                filtered_items.append(item)

        return jsonify(filtered_items)

    return app
