"""
Persistence adapters.

``record_store`` is the typed local store; ``json_storage`` holds the
key-value substrates it can sit on; ``sql_repository`` wraps the hosted
account tables (and the SQL slot substrate).
"""
