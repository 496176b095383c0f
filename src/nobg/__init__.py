"""
nobg: a desktop shell around rembg background removal.

Images are picked or dropped in a customtkinter window, processed in an
isolated worker process, previewed and saved as PNG.
"""

__version__ = "1.0.0"
