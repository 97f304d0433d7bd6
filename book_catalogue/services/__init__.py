"""Book Catalogue - Services Package

This package contains service modules for talking to the catalogue server:
- HTTP client for the remote book calls
"""
