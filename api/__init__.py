"""HTTP layer: todo routes, middleware and shared dependencies."""
