"""Omada Software Controller installer (Python-first, step-driven).

Core design goals:
- Ordered, fail-fast steps
- No temporary artifacts left behind on any exit path
- External tools (apt, dpkg, curl, unzip) driven through one command wrapper
- Centralized logging
"""

__all__ = []
