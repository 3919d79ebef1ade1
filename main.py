# -*- coding: utf-8 -*-
"""
Otisium Backend Flask Application

AI writing tools behind one JSON-over-POST API:
detect, plagiarism, humanize, paraphrase, grammar, translate, summarize,
chat and citation. Each request makes exactly one model call.
Processing Flow: Validate -> Prompt -> Model -> Extract JSON -> Normalize -> Respond.
"""

# ==============================================================================
# 1. IMPORTS
# ==============================================================================
import logging
import os
import time
from functools import wraps
from typing import Any, Callable, Dict, Optional

from flask import Flask, g, jsonify, request
from flask_cors import CORS

from ai_tasks import ClientInputError, WritingTasks
from auth import InMemoryUserStore, InvalidTokenError, TokenService, UserStore, bearer_token, public_user
from model_invoker import ModelInvoker, OpenAIModelInvoker, ProviderError
from prompt_builder import AUTO_DETECT
from settings import CONFIG

# ==============================================================================
# 2. ERROR MESSAGES
# ==============================================================================
TASK_ERROR_MESSAGES = {
    "detect": "AI detection service error",
    "plagiarism": "Plagiarism check service error",
    "humanize": "Humanization service error",
    "paraphrase": "Paraphrase service error",
    "grammar": "Grammar check service error",
    "translate": "Translation service error",
    "summarize": "Summarization service error",
    "chat": "Chat service error",
    "citation": "Citation service error",
}


def _request_id() -> str:
    return f"{time.time():.0f}-{os.getpid()}"


def _error(message: str, status_code: int):
    return jsonify({"status": "error", "message": message}), status_code


# ==============================================================================
# 3. FLASK APP FACTORY
# ==============================================================================
def create_app(
    invoker: ModelInvoker,
    user_store: Optional[UserStore] = None,
    token_service: Optional[TokenService] = None,
    config: Dict[str, Any] = CONFIG,
) -> Flask:
    """
    Builds the Flask app around an injected model invoker.

    When `token_service` is given, every task endpoint requires a valid
    bearer token; without it the endpoints are open.
    """
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config["max_content_length"]
    CORS(app, origins=config["cors_origins"])

    tasks = WritingTasks(invoker, config)
    user_store = user_store if user_store is not None else InMemoryUserStore()
    app.extensions["writing_tasks"] = tasks
    app.extensions["user_store"] = user_store
    app.extensions["token_service"] = token_service

    def authenticated(view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            if token_service is None:
                return view(*args, **kwargs)
            token = bearer_token(request.headers.get("Authorization"))
            if not token:
                return _error("No token provided", 401)
            try:
                g.token_claims = token_service.verify(token)
            except InvalidTokenError as e:
                logging.warning(f"Rejected token on {request.path}: {e}")
                return _error("Invalid token", 401)
            return view(*args, **kwargs)
        return wrapper

    def run_task(task: str, handle: Callable[[Dict[str, Any]], Dict[str, Any]]):
        request_id = _request_id()
        start_request_time = time.time()
        logging.info(f"REQ ID {request_id}: START {request.path} request from {request.remote_addr}")

        if not request.is_json:
            logging.warning(f"REQ ID {request_id}: Request Content-Type is not application/json.")
            return _error("Invalid request format: Content-Type must be application/json", 415)

        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            logging.warning(f"REQ ID {request_id}: Received empty or malformed JSON payload.")
            return _error("No input data received", 400)

        try:
            response_data = handle(data)
            status_code = 200
        except ClientInputError as e:
            logging.warning(f"REQ ID {request_id}: Rejected input: {e}")
            response_data, status_code = {"status": "error", "message": str(e)}, 400
        except ProviderError as e:
            logging.error(f"REQ ID {request_id}: {TASK_ERROR_MESSAGES[task]}: {e}")
            response_data, status_code = {"status": "error", "message": TASK_ERROR_MESSAGES[task]}, 500
        except Exception:
            logging.exception(f"REQ ID {request_id}: UNEXPECTED error in {request.path} endpoint:")
            response_data, status_code = {"status": "error", "message": "An internal server error occurred."}, 500

        end_request_time = time.time()
        logging.info(f"REQ ID {request_id}: END {request.path} request. Total time: {end_request_time - start_request_time:.2f} seconds. Status Code: {status_code}")
        return jsonify(response_data), status_code

    # ==========================================================================
    # 4. API ENDPOINTS
    # ==========================================================================
    @app.errorhandler(413)
    def payload_too_large(e):
        return _error("Request body exceeds the 10MB limit", 413)

    @app.route('/', methods=['GET', 'POST'])
    def index():
        method = request.method
        logging.info(f"REQ ID {_request_id()}: Root '/' received {method} from {request.remote_addr}")
        return jsonify({"status": "ok", "message": f"Otisium backend alive. Received {method}."}), 200

    @app.route('/api/detect', methods=['POST'])
    @authenticated
    def detect_endpoint():
        def handle(data):
            result = tasks.detect(data.get('text'))
            response_data = result.to_payload()
            response_data["highlights"] = [span.to_dict() for span in tasks.highlight(data['text'], result)]
            return response_data
        return run_task("detect", handle)

    @app.route('/api/plagiarism', methods=['POST'])
    @authenticated
    def plagiarism_endpoint():
        return run_task("plagiarism", lambda data: tasks.plagiarism(data.get('text')).to_payload())

    @app.route('/api/humanize', methods=['POST'])
    @authenticated
    def humanize_endpoint():
        return run_task("humanize", lambda data: tasks.humanize(
            data.get('text'), mode=data.get('mode', 'basic'),
        ).to_payload())

    @app.route('/api/paraphrase', methods=['POST'])
    @authenticated
    def paraphrase_endpoint():
        return run_task("paraphrase", lambda data: tasks.paraphrase(
            data.get('text'), mode=data.get('mode', 'standard'), synonym_level=data.get('synonymLevel', 50),
        ).to_payload())

    @app.route('/api/grammar', methods=['POST'])
    @authenticated
    def grammar_endpoint():
        return run_task("grammar", lambda data: tasks.grammar(data.get('text')).to_payload())

    @app.route('/api/translate', methods=['POST'])
    @authenticated
    def translate_endpoint():
        return run_task("translate", lambda data: tasks.translate(
            data.get('text'), target_lang=data.get('targetLang'), source_lang=data.get('sourceLang', AUTO_DETECT),
        ).to_payload())

    @app.route('/api/summarize', methods=['POST'])
    @authenticated
    def summarize_endpoint():
        return run_task("summarize", lambda data: tasks.summarize(
            data.get('text'), mode=data.get('mode', 'paragraph'), length=data.get('length', 'medium'),
        ).to_payload())

    @app.route('/api/chat', methods=['POST'])
    @authenticated
    def chat_endpoint():
        return run_task("chat", lambda data: tasks.chat(data.get('message'), history=data.get('history', [])).to_payload())

    @app.route('/api/citation', methods=['POST'])
    @authenticated
    def citation_endpoint():
        return run_task("citation", lambda data: tasks.citation(data.get('source'), style=data.get('style', 'APA')).to_payload())

    @app.route('/api/auth/me', methods=['GET'])
    def me_endpoint():
        if token_service is None:
            return _error("Authentication is not configured", 503)
        token = bearer_token(request.headers.get("Authorization"))
        if not token:
            return _error("No token provided", 401)
        try:
            claims = token_service.verify(token)
        except InvalidTokenError:
            return _error("Invalid token", 401)
        user = user_store.find_by_id(claims.get("id"))
        if not user:
            return _error("User not found", 401)
        return jsonify({"user": public_user(user)}), 200

    return app


def create_app_from_env(config: Dict[str, Any] = CONFIG) -> Flask:
    """Production wiring: OpenAI invoker from OPENAI_API_KEY, token gate from TOKEN_SECRET."""
    logging.info("=" * 15 + " INITIALIZING FLASK APP " + "=" * 15)
    invoker = OpenAIModelInvoker.from_env(config)
    token_secret = os.environ.get("TOKEN_SECRET")
    token_service = None
    if token_secret:
        token_service = TokenService(token_secret, config["token_max_age_seconds"])
        logging.info("Bearer token authentication enabled.")
    else:
        logging.warning("TOKEN_SECRET not set. Task endpoints are NOT authenticated.")
    return create_app(invoker, token_service=token_service, config=config)


# ==============================================================================
# 5. MAIN EXECUTION BLOCK (For Running the Server Directly)
# ==============================================================================
if __name__ == '__main__':
    print("\n" + "=" * 60); print("--- Otisium Flask Server ---"); print("=" * 60)
    print(" For production run with Gunicorn, e.g.:")
    print("    gunicorn --workers 2 --threads 4 --bind 0.0.0.0:3001 --timeout 180 app:app")
    print("=" * 60 + "\n")

    flask_port = CONFIG["port"]
    flask_debug_mode = os.environ.get("FLASK_DEBUG", "0") == "1"
    print(f"Starting Flask development server on http://127.0.0.1:{flask_port}/")
    print(f" --> DEBUG MODE: {'ON' if flask_debug_mode else 'OFF'} <--")
    create_app_from_env().run(debug=flask_debug_mode, host='127.0.0.1', port=flask_port, threaded=True)
