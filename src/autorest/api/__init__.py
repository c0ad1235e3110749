"""HTTP surface: FastAPI application, routes and the resource dispatcher."""
