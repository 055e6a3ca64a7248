"""
Project IDE Configuration

Handles environment configuration for the server, the Gemini API and exports.
"""

import os


# Server configuration
HOST = os.getenv("PROJECTIDE_HOST", "127.0.0.1")
PORT = int(os.getenv("PROJECTIDE_PORT", "7777"))

# Gemini API
# The key may also be supplied at runtime through /api/gemini/key
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "120"))

# Export / import
GENERATED_ZIP_NAME = os.getenv("GENERATED_ZIP_NAME", "gemini-project.zip")
PROJECT_ZIP_NAME = os.getenv("PROJECT_ZIP_NAME", "editor-project.zip")
IMPORT_FOLDER = os.getenv("IMPORT_FOLDER", "downloads")

# Project name used when an AI reply carries no file blocks
DEFAULT_PROJECT_NAME = "default-project"
DEFAULT_VERSION = "1.0.0"
