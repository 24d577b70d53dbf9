"""Data models and error types"""
