# Routes package init
"""
DysNote Backend — API Routes Package
=====================================

Route Inventory:
    - notes.py:   the six /notes endpoints (mounted under API_PREFIX)
    - health.py:  GET /health (always at the root)

Routes stay thin: parse the request, make one repository call, shape the
response. Status-code mapping for errors lives in the global exception
handlers registered by main.py.
"""
