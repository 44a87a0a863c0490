"""
HTTP and Socket.IO surface of the dashboard.

routes/ holds the REST endpoints, schemas/ their pydantic models,
middleware/ the error envelope and socketio/ the live mirror of the view.
"""

from api.main import create_app

__all__ = ["create_app"]
