"""
KV-Store: In-Memory Key-Value Store

A volatile, thread-safe key-value store served over HTTP with
FastAPI and uvicorn. Values are kept as canonical JSON documents.
"""

__version__ = "1.0.0"
