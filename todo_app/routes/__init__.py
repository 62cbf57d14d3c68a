"""
Routes package for the todo application.

This package contains the REST API blueprint factory:
- api: JSON endpoints for task lists and their tasks
"""
