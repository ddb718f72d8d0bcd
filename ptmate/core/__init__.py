"""
Core business logic for personal-training practice management.

This module is framework-agnostic - it doesn't import FastAPI, SQLAlchemy,
or any infrastructure concerns. Repositories, hashers, token codecs and
object stores are described as protocols and supplied by the caller.
"""
