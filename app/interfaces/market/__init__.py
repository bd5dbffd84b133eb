"""Market interface layer: HTTP routes, schemas and dependency wiring."""
