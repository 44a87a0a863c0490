"""HTTP routers, mounted under /api/v1 by api.main.create_app."""
