"""REST gateway exposing CRUD over named record collections."""
