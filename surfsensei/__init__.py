"""SurfSensei: an AI surf spot advisor served as a small FastAPI app."""

__version__ = "0.1.0"
