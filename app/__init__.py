"""Task Manager: FastAPI backend (api, services, models, db) and API client (client)."""
