"""
DevPulse Check-in - Web Server Entry Point
==========================================

Run this to start the check-in form:
    python main.py

Then open http://127.0.0.1:8000 in your browser.
The admin table lives at http://127.0.0.1:8000/admin

To export the stored reviews without the web UI:
    python export_report.py
"""

import uvicorn

from devpulse.infrastructure.config import get_settings


def main():
    """Start the web server."""
    print("\n" + "=" * 50)
    print("   DevPulse - Monthly Check-in")
    print("=" * 50)

    for issue in get_settings().validate():
        print(f"   {issue}")

    print("\n   Starting server at http://127.0.0.1:8000")
    print("   Press Ctrl+C to stop\n")

    uvicorn.run(
        "devpulse.web.app:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )


if __name__ == "__main__":
    main()
