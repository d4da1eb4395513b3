"""FastAPI server for the Wikipedia Picture of the Day service."""
