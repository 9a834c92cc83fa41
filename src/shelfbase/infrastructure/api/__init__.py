"""HTTP API: FastAPI application, dependencies, routes and schemas."""
