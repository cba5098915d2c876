# Services package init
"""
Notekeeper Backend: Services Layer
===================================

What:  The note operations, sitting between routes (HTTP) and the database.
How:   Services take a session and validated input, run one statement, and
       return response schemas or raise domain exceptions.

Service Inventory:
    - NoteService: list, get, create, edit and delete over the `notes` table
"""
