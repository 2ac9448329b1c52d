"""
pocketlearn - data-access core of the course/lesson learning client.

Packages:
- core: session management, collection retrieval, error taxonomy
- catalog: domain models, record mapping, search/filter/ordering
- cli: terminal front end
"""

__version__ = "1.0.0"
