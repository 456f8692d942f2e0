"""Convert HTML files to Markdown, naming each output after its <title>."""

__version__ = "0.1.0"
