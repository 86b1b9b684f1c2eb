"""
Flask API for Ratioed
JSON interface for 1-on-1, group and compare analysis
"""

import logging
from datetime import datetime

from flask import Flask, request, jsonify

from . import config
from .analysis_engine import analyze_group, analyze_one_on_one, compare_conversations
from .errors import InsufficientDataError
from .insight_engine import explain_pattern

logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = config.MAX_UPLOAD_MB * 1024 * 1024


class BadRequest(ValueError):
    """Request body is missing or malformed."""


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def _conversation_input(data: dict):
    """Pick the transcript text or message records out of a request body."""
    if isinstance(data.get('transcript'), str) and data['transcript'].strip():
        return data['transcript']
    if isinstance(data.get('messages'), list):
        return data['messages']
    raise BadRequest("Provide 'transcript' or 'messages'")


@app.errorhandler(InsufficientDataError)
def handle_insufficient_data(e):
    logger.info(f"Rejected request: {e}")
    return jsonify({
        "error": str(e),
        "code": "INSUFFICIENT_DATA",
        "found": e.found,
        "required": e.required,
    }), 422


@app.errorhandler(BadRequest)
def handle_bad_request(e):
    return jsonify({"error": str(e), "code": "BAD_REQUEST"}), 400


@app.errorhandler(413)
def handle_too_large(e):
    return jsonify({
        "error": f"File too large! Maximum size is {config.MAX_UPLOAD_MB}MB.",
        "code": "TOO_LARGE",
    }), 413


@app.route('/api/analyze', methods=['POST'])
def api_analyze():
    """Analyze a 1-on-1 conversation from transcript text or message records."""
    data = _json_body()
    conversation = _conversation_input(data)

    try:
        result = analyze_one_on_one(conversation)
    except (TypeError, KeyError) as e:
        raise BadRequest(f"Invalid message records: {e}")
    except InsufficientDataError:
        raise
    except ValueError as e:
        raise BadRequest(str(e))

    return jsonify(result)


@app.route('/api/analyze/group', methods=['POST'])
def api_analyze_group():
    """Analyze a group chat transcript."""
    data = _json_body()
    transcript = data.get('transcript')
    if not isinstance(transcript, str) or not transcript.strip():
        raise BadRequest("Provide 'transcript'")

    return jsonify(analyze_group(transcript))


@app.route('/api/compare', methods=['POST'])
def api_compare():
    """Compare two 1-on-1 conversations."""
    data = _json_body()
    first = data.get('a')
    second = data.get('b')
    if not isinstance(first, dict) or not isinstance(second, dict):
        raise BadRequest("Provide 'a' and 'b' conversations")

    try:
        result = compare_conversations(
            _conversation_input(first),
            _conversation_input(second),
            label_a=first.get('label') or "Person A",
            label_b=second.get('label') or "Person B",
        )
    except (TypeError, KeyError) as e:
        raise BadRequest(f"Invalid message records: {e}")
    except InsufficientDataError:
        raise
    except ValueError as e:
        raise BadRequest(str(e))

    return jsonify(result)


@app.route('/api/patterns/<path:title>')
def api_pattern(title):
    """Explain a detected pattern."""
    return jsonify(explain_pattern(title))


@app.route('/health')
def health():
    """Health check endpoint for Docker and monitoring."""
    valid, msg = config.validate_config()
    status = {
        'status': 'ok' if valid else 'degraded',
        'timestamp': datetime.now().isoformat(),
        'tagline_api': config.USE_TAGLINE_API,
        'config': msg,
    }
    return jsonify(status), 200 if valid else 503


if __name__ == '__main__':
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    valid, msg = config.validate_config()
    if not valid:
        logger.warning(f"Config validation: {msg}")

    logger.info(f"Starting server (debug=True, use_reloader={config.DEV_USE_RELOADER})")
    app.run(debug=True, use_reloader=config.DEV_USE_RELOADER, host='0.0.0.0', port=config.API_PORT)
