"""
Core utilities shared across the gateway.

This package hosts configuration (env vars, paths, file-field table) and
logging setup. Routers, services and repositories depend on these
primitives instead of reading os.environ themselves.
"""
