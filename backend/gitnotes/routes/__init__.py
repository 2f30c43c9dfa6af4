"""
GitNotes Backend — Routes Package
===================================

Route Inventory:
    - pages.py:  GET  /                   (static index page)
    - notes.py:  GET  /notes              (all notes, JSON)
                 POST /notes              (create note)
                 GET  /notes/raw/{id}     (note content, plain text)
                 GET  /notes/{id}         (note detail, HTML)

Every other method/path combination answers 404 "Not Found" (see the
HTTPException handler in main.py).

Routes stay thin: they extract input, call NoteService, and pick the
response class. Errors are raised, not returned, and mapped in main.py.
"""
