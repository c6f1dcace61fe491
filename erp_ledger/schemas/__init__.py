"""Pydantic schemas for requests, results and source documents."""
