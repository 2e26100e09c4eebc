"""
Test suite for photoshelf.

- unit/: models, services, handlers and view state in isolation
- integration/: gallery and export flows against the in-memory backend
"""
