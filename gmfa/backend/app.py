"""
FLASK APP FACTORY - GMFA HTTP API
=================================

Builds the Flask app that serves the current TOTP codes of the secrets file
over HTTP, enables CORS and registers the routes blueprint.

Run it with `gmfa serve` (binds 127.0.0.1:5000 by default). The API returns
live codes and accepts new credentials, so keep it on localhost.
"""
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from gmfa import config


def create_app(
    secrets_file: Optional[str] = None,
    digits: Optional[int] = None,
    period: Optional[int] = None,
) -> Flask:
    app = Flask(__name__)
    app.config.update(
        GMFA_SECRETS_FILE=config.get_secrets_file(secrets_file),
        GMFA_DIGITS=config.get_digits(digits),
        GMFA_PERIOD=config.get_period(period),
    )

    # allow a browser front end on another port to call the API
    CORS(app)

    from gmfa.backend.routes import gmfa_bp

    app.register_blueprint(gmfa_bp)

    @app.route('/', methods=['GET'])
    def index():
        return jsonify({
            "service": "gmfa",
            "endpoints": [
                "GET /codes",
                "GET /credentials",
                "POST /credentials",
                "GET /credentials/<index>/uri",
                "GET /credentials/<index>/qr",
            ],
        })

    return app
