"""
FastAPI routers grouped by domain (users, shops, menu, orders, reviews).

Each file inside this package exposes an APIRouter included by app.py. Handlers
stay thin: they validate and authorize, then call the stores or AuthService.
"""
