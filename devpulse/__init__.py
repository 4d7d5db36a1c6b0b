# DevPulse Check-in - Monthly Developer Check-in Form
# ====================================================
# Layered Architecture:
#
# ARCHITECTURE LAYERS:
# - Presentation:   FastAPI web wizard and admin table (web/)
# - Application:    Wizard state machine and submission workflow (application/)
# - Domain:         Review model, satisfaction scale, periods (domain/)
# - Infrastructure: Local store, spreadsheet endpoint, LLM, CSV (infrastructure/)
#
# Infrastructure components can be swapped (e.g. another LLM provider or
# another spreadsheet endpoint) without touching the workflow.

__version__ = "0.1.0"
