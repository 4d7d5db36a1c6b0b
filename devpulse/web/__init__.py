# Presentation layer: FastAPI routes and HTML renderers.
