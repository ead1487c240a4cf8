"""
Task Tracker package.

- `task_tracker.main`: FastAPI gateway exposing the `/tasks` endpoints
- `task_tracker.client`: HTTP client, state transitions and text view
- `task_tracker.cli`: command line entry point
"""
