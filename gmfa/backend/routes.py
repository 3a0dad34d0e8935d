"""
GMFA API ROUTES - FLASK BLUEPRINT

Endpoints:
- GET  /codes                     current code of every stored credential
- GET  /credentials               stored labels with their index (no secrets)
- POST /credentials               add one otpauth URL, body {"uri": "..."}
- GET  /credentials/<index>/uri   canonical otpauth line of one entry
- GET  /credentials/<index>/qr    QR code (PNG, base64 data URL) of one entry

Examples:
curl http://localhost:5000/codes
curl -X POST http://localhost:5000/credentials -H "Content-Type: application/json" \
     -d '{"uri": "otpauth://totp/GitHub:alice?secret=JBSWY3DPEHPK3PXP"}'
"""

import base64
import io
import logging

import qrcode
from flask import Blueprint, current_app, jsonify, request

from gmfa.core import otp_core
from gmfa.core.errors import InvalidSecretEncodingError, OTPAuthURIError
from gmfa.core.otpauth import format_otpauth_url, parse_otpauth_url
from gmfa.database.secrets_file import append_credentials, load_credentials

logger = logging.getLogger(__name__)

gmfa_bp = Blueprint('gmfa', __name__)


def _stored_credentials():
    """Credentials of the configured secrets file; a missing file reads as empty."""
    try:
        return load_credentials(current_app.config["GMFA_SECRETS_FILE"])
    except FileNotFoundError:
        return []


def _credential_at(index):
    credentials = _stored_credentials()
    if not 0 <= index < len(credentials):
        return None
    return credentials[index]


@gmfa_bp.route('/codes', methods=['GET'])
def get_codes():
    """
    CURRENT CODES

      curl http://localhost:5000/codes

    Output:
      {"valid_until": 1700000010, "remaining": 12, "period": 30, "digits": 6,
       "codes": [{"index": 0, "label": "GitHub:alice", "code": "123456"}, ...]}

    An entry whose secret is not valid base32 has "code": null and an "error".
    """
    period = current_app.config["GMFA_PERIOD"]
    digits = current_app.config["GMFA_DIGITS"]
    timestamp = otp_core.now()

    codes = []
    for i, credential in enumerate(_stored_credentials()):
        item = {"index": i, "label": credential.label}
        try:
            item["code"] = otp_core.totp(credential.secret, timestamp, period, digits)
        except InvalidSecretEncodingError as e:
            logger.warning("Cannot generate code for %s: %s", credential.label, e)
            item["code"] = None
            item["error"] = e.kind
        codes.append(item)

    return jsonify({
        "valid_until": otp_core.valid_until(timestamp, period),
        "remaining": otp_core.seconds_remaining(timestamp, period),
        "period": period,
        "digits": digits,
        "codes": codes,
    })


@gmfa_bp.route('/credentials', methods=['GET'])
def list_credentials():
    """
    STORED LABELS

      curl http://localhost:5000/credentials
    """
    return jsonify({
        "credentials": [
            {"index": i, "label": c.label} for i, c in enumerate(_stored_credentials())
        ]
    })


@gmfa_bp.route('/credentials', methods=['POST'])
def add_credential():
    """
    ADD A CREDENTIAL

    Input (JSON body):
      {"uri": "otpauth://totp/<label>?secret=<secret>"}

    Output:
      201 {"index": 3, "label": "..."}            on success
      400 {"error": "missing_secret", "message": "..."}  on an invalid URL
    """
    data = request.get_json(silent=True)
    if not data or not isinstance(data.get("uri"), str):
        return jsonify({"error": "missing_uri", "message": "uri is required"}), 400

    try:
        credential = parse_otpauth_url(data["uri"].strip())
    except OTPAuthURIError as e:
        return jsonify({"error": e.kind, "message": str(e)}), 400

    stored = append_credentials([credential], current_app.config["GMFA_SECRETS_FILE"])
    logger.info("Added MFA entry %s", credential.label)
    return jsonify({"index": len(stored) - 1, "label": credential.label}), 201


@gmfa_bp.route('/credentials/<int:index>/uri', methods=['GET'])
def get_credential_uri(index):
    credential = _credential_at(index)
    if credential is None:
        return jsonify({"error": "not_found", "message": f"No entry at index {index}"}), 404
    return jsonify({"index": index, "label": credential.label, "uri": format_otpauth_url(credential)})


@gmfa_bp.route('/credentials/<int:index>/qr', methods=['GET'])
def get_credential_qr(index):
    """
    QR CODE FOR AN AUTHENTICATOR APP

      curl http://localhost:5000/credentials/0/qr
    """
    credential = _credential_at(index)
    if credential is None:
        return jsonify({"error": "not_found", "message": f"No entry at index {index}"}), 404

    uri = format_otpauth_url(credential)
    qr = qrcode.QRCode(version=1, box_size=10, border=5)
    qr.add_data(uri)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    img_str = base64.b64encode(buffer.getvalue()).decode()

    return jsonify({
        "index": index,
        "label": credential.label,
        "qr_code": f"data:image/png;base64,{img_str}",
    })
