"""
HTTP boundary for the intake backend.

Design intent:
- Expose thin, typed endpoints for the draft lifecycle.
- Map domain and storage failures to predictable status codes.
- Serve the front-end bundle without touching draft logic.
"""
