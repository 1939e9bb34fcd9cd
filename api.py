"""
Flask REST API for PocketCalc
Drives the calculator and exposes its state and history as JSON endpoints
"""
import logging
import threading

from flask import Flask, jsonify, request
from flask_cors import CORS

import config
from calculator import Calculator
from history_manager import HistoryManager
from storage import SQLiteStore

logger = logging.getLogger(__name__)


def build_calculator(db_path=config.DB_PATH):
    """Wire storage, history and calculator, loading saved history"""
    history_manager = HistoryManager(SQLiteStore(db_path))
    history_manager.load()
    return Calculator(history_manager)


def create_app(calculator=None):
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes

    if calculator is None:
        calculator = build_calculator()
    lock = threading.Lock()

    def ok(data):
        return jsonify({'success': True, 'data': data})

    def bad_request(message):
        return jsonify({'success': False, 'error': message}), 400

    def field(name):
        """Non-empty string from the JSON body, or None"""
        payload = request.get_json(silent=True) or {}
        value = payload.get(name)
        if not isinstance(value, str) or not value:
            return None
        return value

    @app.route('/api')
    def api_info():
        """API information"""
        return jsonify({
            'name': config.APP_NAME,
            'version': config.VERSION,
            'endpoints': [
                'GET /api/state',
                'POST /api/press',
                'POST /api/digit',
                'POST /api/operator',
                'POST /api/delete',
                'POST /api/clear',
                'POST /api/evaluate',
                'POST /api/unary/<operation>',
                'GET /api/history',
                'DELETE /api/history',
            ],
        })

    @app.route('/api/state')
    def get_state():
        with lock:
            return ok(calculator.state())

    @app.route('/api/press', methods=['POST'])
    def press():
        """Handle a keypad button press"""
        button = field('button')
        if button is None:
            return bad_request("Missing 'button'")
        try:
            with lock:
                return ok(calculator.press(button))
        except ValueError as e:
            return bad_request(str(e))

    @app.route('/api/digit', methods=['POST'])
    def add_digit():
        value = field('value')
        if value is None:
            return bad_request("Missing 'value'")
        if any(ch not in "0123456789." for ch in value):
            return bad_request("Digits and '.' only")
        with lock:
            calculator.add_digit(value)
            return ok(calculator.state())

    @app.route('/api/operator', methods=['POST'])
    def add_operator():
        value = field('value')
        if value is None:
            return bad_request("Missing 'value'")
        try:
            with lock:
                calculator.add_operator(value)
                return ok(calculator.state())
        except ValueError as e:
            return bad_request(str(e))

    @app.route('/api/delete', methods=['POST'])
    def delete_last():
        with lock:
            calculator.clear_entry()
            return ok(calculator.state())

    @app.route('/api/clear', methods=['POST'])
    def clear():
        with lock:
            calculator.clear()
            return ok(calculator.state())

    @app.route('/api/evaluate', methods=['POST'])
    def evaluate():
        with lock:
            calculator.evaluate()
            return ok(calculator.state())

    @app.route('/api/unary/<operation>', methods=['POST'])
    def apply_unary(operation):
        try:
            with lock:
                calculator.apply_unary(operation)
                return ok(calculator.state())
        except ValueError:
            return bad_request(f"Unknown operation: {operation}")

    @app.route('/api/history', methods=['GET'])
    def get_history():
        """Get calculation history, most recent first"""
        with lock:
            history = calculator.history_manager.get_calculation_history()
        return jsonify({'success': True, 'data': history, 'count': len(history)})

    @app.route('/api/history', methods=['DELETE'])
    def clear_history():
        with lock:
            cleared = calculator.clear_history()
            state = calculator.state()
        if not cleared:
            logger.warning("History was not cleared from storage")
        return jsonify({'success': cleared, 'data': state})

    return app
