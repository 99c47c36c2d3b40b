"""
Notes Service - Services Layer
===============================

What:  Logic between the routes (HTTP) and the database (persistence).

Service Inventory:
    - validation: the four field rules and payload cleaning, shared by the
      routes and the client view
    - NoteStore: list/get/create/update/delete over the `notes` table
"""
