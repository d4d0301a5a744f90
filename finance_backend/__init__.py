"""Personal finance core: snapshots, derived reports and a Flask API."""

__version__ = "0.1.0"
