"""
Task Manager API.

Multi-user task management service: accounts with signed bearer tokens and
owner-scoped task CRUD over a relational store.
"""

__version__ = "1.0.0"
