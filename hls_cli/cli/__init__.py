"""
Command-line interface: Typer application, Rich progress display and formatters.
"""
