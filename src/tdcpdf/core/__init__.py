"""Core building blocks of the PDF output format."""
