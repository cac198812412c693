"""
Use cases for the marketplace backend.

``views`` builds the derived pages (earnings, orders, statement) from
records; ``account_service`` and ``session_service`` own the account
database. Routers read and write records through the typed ``RecordStore``
accessors and never open a SQL session themselves.
"""
