"""
Flask REST API for RideCalc
Exposes the host's numeric fields and calculator sessions as JSON endpoints
"""
import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

import config
from calculator_engine import engine
from session_manager import SessionManager

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes

# Initialize components
session_manager = SessionManager()


def _fail(e):
    """Map an exception to the JSON error envelope"""
    if isinstance(e, KeyError):
        return jsonify({'success': False, 'error': f"Not found: {e.args[0]}"}), 404
    if isinstance(e, (ValueError, TypeError)):
        return jsonify({'success': False, 'error': str(e)}), 400
    logger.exception("Unhandled API error")
    return jsonify({'success': False, 'error': str(e)}), 500


def _body():
    return request.get_json(silent=True) or {}


@app.route('/api')
def api_info():
    """API information page"""
    return """
    <html>
    <head><title>RideCalc API</title></head>
    <body style="font-family: Arial; padding: 40px; background: #1a1a2e; color: white;">
        <h1>RideCalc API Server</h1>
        <h2>Available Endpoints:</h2>
        <ul>
            <li><a href="/api/fields" style="color: #2196F3;">/api/fields</a> - Numeric fields</li>
            <li>POST /api/sessions - Open a calculator on a field</li>
            <li>POST /api/sessions/&lt;id&gt;/actions - Press keys</li>
            <li>GET /api/sessions/&lt;id&gt;/tape - Calculation tape</li>
            <li>POST /api/sessions/&lt;id&gt;/done - Commit to the field</li>
            <li>POST /api/sessions/&lt;id&gt;/cancel - Discard</li>
            <li>POST /api/evaluate - Evaluate typed field text</li>
        </ul>
    </body>
    </html>
    """


@app.route('/api/fields')
def get_fields():
    """Get all numeric fields"""
    try:
        return jsonify({'success': True, 'data': session_manager.get_field_list()})
    except Exception as e:
        return _fail(e)


@app.route('/api/fields/<name>', methods=['GET'])
def get_field(name):
    try:
        field = session_manager.get_field(name)
        return jsonify({'success': True, 'data': session_manager.field_to_dict(field)})
    except Exception as e:
        return _fail(e)


@app.route('/api/fields/<name>', methods=['PUT'])
def update_field(name):
    """Set a field from a number ("value") or typed text ("text")"""
    try:
        data = _body()
        if 'text' in data:
            accepted, field = session_manager.submit_field_text(name, str(data['text']))
            if not accepted:
                return jsonify({'success': False, 'error': f"Could not use {data['text']!r}"}), 400
        elif 'value' in data:
            field = session_manager.set_field_value(name, float(data['value']))
        else:
            raise ValueError("Body needs 'value' or 'text'")
        return jsonify({'success': True, 'data': session_manager.field_to_dict(field)})
    except Exception as e:
        return _fail(e)


@app.route('/api/sessions', methods=['POST'])
def open_session():
    """Open a calculator session seeded from a field"""
    try:
        data = _body()
        if 'field' not in data:
            raise ValueError("Body needs 'field'")
        decimal_places = data.get('decimal_places')
        if decimal_places is not None:
            decimal_places = int(decimal_places)
        session_id = session_manager.open_session(data['field'], decimal_places)
        session = session_manager.get_session(session_id)
        return jsonify({'success': True, 'data': session_manager.session_to_dict(session_id, session)}), 201
    except Exception as e:
        return _fail(e)


@app.route('/api/sessions/<session_id>')
def get_session(session_id):
    try:
        session = session_manager.get_session(session_id)
        return jsonify({'success': True, 'data': session_manager.session_to_dict(session_id, session)})
    except Exception as e:
        return _fail(e)


@app.route('/api/sessions/<session_id>/actions', methods=['POST'])
def press_keys(session_id):
    """Press one key ("key") or several in order ("keys")"""
    try:
        data = _body()
        if 'keys' in data:
            keys = [str(key) for key in data['keys']]
        elif 'key' in data:
            keys = [str(data['key'])]
        else:
            raise ValueError("Body needs 'key' or 'keys'")
        return jsonify({'success': True, 'data': session_manager.press_keys(session_id, keys)})
    except Exception as e:
        return _fail(e)


@app.route('/api/sessions/<session_id>/tape')
def get_tape(session_id):
    """Get the calculation tape, oldest first"""
    try:
        session = session_manager.get_session(session_id)
        return jsonify({
            'success': True,
            'data': {
                'steps': session.tape.as_dicts(),
                'lines': session.tape.format_calculation_history(session.calculator.formatter),
            }
        })
    except Exception as e:
        return _fail(e)


@app.route('/api/sessions/<session_id>/done', methods=['POST'])
def finish_session(session_id):
    """Commit the session value to its field"""
    try:
        data = session_manager.finish_session(session_id)
        field = session_manager.get_field(data['field'])
        data['field_value'] = field.value
        return jsonify({'success': True, 'data': data})
    except Exception as e:
        return _fail(e)


@app.route('/api/sessions/<session_id>/cancel', methods=['POST'])
def cancel_session(session_id):
    try:
        return jsonify({'success': True, 'data': session_manager.cancel_session(session_id)})
    except Exception as e:
        return _fail(e)


@app.route('/api/evaluate', methods=['POST'])
def evaluate_expression():
    """Evaluate typed text the way a numeric field would"""
    try:
        expression = str(_body().get('expression', ''))
        result = engine.evaluate_text(expression)
        return jsonify({
            'success': True,
            'data': {
                'expression': expression,
                'result': result,
                'valid': engine.is_valid_expression(expression),
            }
        })
    except Exception as e:
        return _fail(e)


if __name__ == '__main__':
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    print("\n" + "="*60)
    print("RideCalc API Server")
    print("="*60)
    print(f"Server starting on http://{config.WEB_HOST}:{config.WEB_PORT}")
    print(f"Access from this device: http://localhost:{config.WEB_PORT}/api")
    if config.WEB_HOST == '0.0.0.0':
        print(f"Access from network: http://<your-ip>:{config.WEB_PORT}/api")
    print("="*60 + "\n")

    app.run(host=config.WEB_HOST, port=config.WEB_PORT, debug=False)
