"""Configuration"""
