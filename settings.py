# -*- coding: utf-8 -*-
"""
Otisium backend configuration.

Loads the .env file, configures logging and exposes the CONFIG dict shared by
the prompt, model and HTTP layers.
"""

import logging
import os

from dotenv import load_dotenv

# ==============================================================================
# Load .env file
# ==============================================================================
load_dotenv()

# ==============================================================================
# CONFIGURATION & CONSTANTS
# ==============================================================================
CONFIG = {
    "openai_model": os.environ.get("OPENAI_MODEL", "o4-mini"),
    "openai_temperature": 1.0,
    "openai_max_output_tokens": 4096,
    "detection_max_output_tokens": 8192,
    "openai_timeout_seconds": float(os.environ.get("OPENAI_TIMEOUT_SECONDS", "120")),
    "openai_max_retries": 0,
    # Effort tier -> provider reasoning_effort
    "effort_levels": {"fast": "low", "deep": "high"},
    "max_content_length": 10 * 1024 * 1024,  # 10MB request body ceiling
    "min_text_length": {
        "detect": 50,
        "plagiarism": 10,
        "humanize": 10,
        "paraphrase": 10,
        "grammar": 10,
        "summarize": 10,
    },
    "token_max_age_seconds": 7 * 24 * 60 * 60,
    "cors_origins": os.environ.get("CORS_ORIGINS", "*"),
    "port": int(os.environ.get("PORT", "3001")),
}

# --- Configure Logging ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] [%(process)d] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logging.getLogger("httpx").setLevel(logging.WARNING)
