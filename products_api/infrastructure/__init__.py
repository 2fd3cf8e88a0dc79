"""Persistence for the Products API.

The relational store is reached through SQLAlchemy's async engine. A single
``Database`` store client is created by the application factory and shared
with handlers through dependency injection.
"""
