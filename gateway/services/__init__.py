"""
Use cases for the gateway.

Service modules orchestrate repositories and the upload directory to
implement the CRUD rules (id assignment, merges, file cleanup). Routers call
these services instead of manipulating the store directly.
"""
