"""
Mock REST API for the store catalog.

Role-partitioned product collections plus login, registration and logout,
served by FastAPI over a flat JSON file. Build the app with
mock_api.app.create_app().
"""
