"""Core business logic: catalog, scoring, skills, API clients and data models.

This module is framework-agnostic. It has no dependency on FastAPI, MCP or
the database. Both the HTTP API and the FastMCP server import from here.
"""
