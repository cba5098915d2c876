# Routes package init
"""
Notekeeper Backend: API Routes Package
=======================================

Route Inventory:
    - notes.py:   GET/POST   {prefix}/notes
                  GET/PATCH/DELETE {prefix}/notes/{id}
    - health.py:  GET /health

Routes stay thin: they pull input out of the request, call NoteService, and
wrap the result in the success envelope. Failure envelopes come from the
exception handlers registered in main.py.
"""
