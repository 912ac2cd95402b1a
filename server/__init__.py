"""
Flask backend and UI for the coal log digitizer.
"""
