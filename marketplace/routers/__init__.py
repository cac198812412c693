"""
FastAPI routers grouped by page (auth, profile, gigs, billing/earnings, orders).

Each module exposes an APIRouter included by ``marketplace.app``. Routers
resolve the record store and account service from ``app.state`` via
``deps`` rather than constructing their own.
"""
