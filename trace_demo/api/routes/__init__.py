"""API route handlers for trace-demo.

Routes:
- ping: /api/v1/ping
- health: /health, /health/ready
"""

__all__: list[str] = []
