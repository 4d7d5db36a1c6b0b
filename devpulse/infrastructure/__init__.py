# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - persistence/: SQLite key-value local store (identity + reviews)
# - sheets/: Spreadsheet web-app endpoint (append/check)
# - llm/: OpenRouter LLM motivational insight
# - export/: CSV report
# - config/: Environment and settings management
#
# This layer can be replaced entirely without affecting domain/application layers.
