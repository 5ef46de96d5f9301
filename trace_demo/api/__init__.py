"""HTTP layer for trace-demo: routes, middleware and error handlers."""
