"""
Notes Service - API Routes Package
===================================

Route Inventory:
    - notes.py:   GET/POST       {api_prefix}/notes
                  GET/PUT/DELETE {api_prefix}/notes/{id}
    - health.py:  GET /health, GET /

Routes stay thin: parse the request, call validation and the NoteStore,
shape the envelope. Status codes for failures come from the exception
handlers in main.py.
"""
