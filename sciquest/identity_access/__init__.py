"""
Identity and profile logic for SciQuest Heroes.

Framework-agnostic: nothing in this package imports FastAPI. The web layer
calls into it and turns the returned values into HTML responses.
"""
