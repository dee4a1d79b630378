"""
shop_service package

This package contains the backend logic for the shop service.
It includes:

- FastAPI application (`main.py`) and routers (`routes/`)
- SQLAlchemy models and database integration (`models.py`, `db.py`)
- Entity rules checked before every write (`validation.py`)
- Placement consistency for stock and order totals (`services/placements.py`)
- Authentication and JWT logic (`auth.py`)
- Pydantic schemas (`schemas.py`)
"""
