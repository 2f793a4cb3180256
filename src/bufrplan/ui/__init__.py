"""Command-line surface for bufrplan."""
