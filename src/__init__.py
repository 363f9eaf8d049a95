"""Gemini prompt panel: key validation, prompt sending, response log."""

from dotenv import load_dotenv

load_dotenv()
