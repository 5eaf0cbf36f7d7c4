"""Domain layer for bankimport application.

Services are imported from their modules (``bankimport.domain.import_session``
and friends) so that the database layer can import ``entities`` without
pulling the services in.
"""
