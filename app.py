from datetime import date, datetime, timezone

from flask import Flask, abort, jsonify, render_template, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

import aggregation
from config import Config
from errors import StorageError, TrackerError, ValidationError
from models import db
from store import TransactionStore

MAX_FLOW_MONTHS = 24
DEFAULT_FLOW_MONTHS = 7


def create_app(settings=None, config=None):
    """Build the API app. `settings` overrides Flask config keys (tests)."""
    config = config or Config()
    app = Flask(__name__, template_folder=str(config.template_dir))
    app.config.update(config.flask_settings())
    if settings:
        app.config.update(settings)
    db.init_app(app)
    store = TransactionStore()

    # No migration tool: create missing tables at startup.
    with app.app_context():
        db.create_all()
    app.logger.info("Database schema ensured at %s", app.config['SQLALCHEMY_DATABASE_URI'])

    @app.after_request
    def add_cors_headers(resp):
        resp.headers['Access-Control-Allow-Origin'] = app.config.get('ALLOW_ORIGIN', '*')
        resp.headers['Access-Control-Allow-Methods'] = 'GET, POST, DELETE, OPTIONS'
        resp.headers['Access-Control-Allow-Headers'] = 'Accept, Content-Type'
        return resp

    @app.errorhandler(TrackerError)
    def handle_tracker_error(err):
        if isinstance(err, StorageError):
            app.logger.error("%s %s failed: %s", request.method, request.path, err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        # The SPA shell keeps Werkzeug's HTML errors; the API always answers JSON.
        if not request.path.startswith('/api/'):
            return err
        return jsonify({'error': err.description}), err.code

    @app.route('/api/health')
    def health():
        try:
            db.session.execute(text('select 1'))
        except SQLAlchemyError as exc:
            db.session.rollback()
            app.logger.exception("health check failed")
            return jsonify({'status': 'error', 'message': str(exc)}), 500
        return jsonify({'status': 'ok', 'time': datetime.now(timezone.utc).isoformat()})

    @app.route('/api/transactions', methods=['GET'])
    def list_transactions():
        return jsonify([t.to_dict() for t in store.list()])

    @app.route('/api/transactions', methods=['POST'])
    def create_transaction():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValidationError("invalid JSON body")
        tx = store.create(
            type=body.get('type'),
            amount=body.get('amount'),
            category=body.get('category'),
            date=body.get('date'),
            note=body.get('note'),
            method=body.get('method'),
        )
        return jsonify(tx.to_dict()), 201

    @app.route('/api/transactions/<tx_id>', methods=['GET'])
    def get_transaction(tx_id):
        return jsonify(store.get(tx_id).to_dict())

    @app.route('/api/transactions/', methods=['DELETE'])
    @app.route('/api/transactions/<tx_id>', methods=['DELETE'])
    def delete_transaction(tx_id=None):
        tx_id = (tx_id or '').strip()
        if not tx_id:
            raise ValidationError("id required")
        store.delete(tx_id)
        return jsonify({'ok': True})

    @app.route('/api/import', methods=['POST'])
    def import_transactions():
        """Bulk insert. Accepts {transactions: [...]} or a bare array."""
        body = request.get_json(silent=True)
        records = body.get('transactions') if isinstance(body, dict) else body
        if not isinstance(records, list):
            raise ValidationError("invalid JSON: expected {transactions:[…]}")
        return jsonify(store.import_many(records))

    @app.route('/api/stats')
    def stats():
        return jsonify(store.stats())

    @app.route('/api/category-breakdown')
    def category_breakdown():
        return jsonify(store.category_breakdown())

    @app.route('/api/monthly-flow')
    def monthly_flow():
        months = request.args.get('months', type=int)
        if months is None or not 0 < months <= MAX_FLOW_MONTHS:
            months = DEFAULT_FLOW_MONTHS
        return jsonify(aggregation.monthly_flow(store.list(), date.today(), months))

    @app.route('/', defaults={'path': ''})
    @app.route('/<path:path>')
    def index(path):
        if path == 'api' or path.startswith('api/'):
            abort(404, description="Not found")
        return render_template('index.html', currency=app.config.get('CURRENCY_SYMBOL', '$'))

    return app


if __name__ == '__main__':
    config = Config()
    create_app(config=config).run(port=config.port, debug=config.debug)
