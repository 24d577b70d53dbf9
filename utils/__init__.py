"""Shared helpers: logging and the Gemini client"""
