"""Shelf core package.

Modules:
- archive: read-only access to zip/cbz/cbr archives
- images: page classification and content types
- covers: cover extraction and cleanup
- index: durable JSON comic index
- scanner: library reconciliation
- pages: single-page retrieval
- app: FastAPI app and routing
- config: INI parsing and config object
"""

__version__ = "0.1.0"
