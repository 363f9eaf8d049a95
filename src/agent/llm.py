"""LLM backend for the prompt panel using Gemini via google-genai SDK."""

import os

from google import genai

MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")


def get_client(api_key: str) -> genai.Client:
    """Create a Gemini client bound to api_key."""
    if not api_key:
        raise ValueError("Gemini API key is required")
    return genai.Client(api_key=api_key)
