"""
Test suite for the todo application.

This package contains:
- unit/: models, transfer objects, mappers, repositories and services
- integration/: REST API tests through the Flask test client
- smoke/: critical-path checks against a running server
"""
