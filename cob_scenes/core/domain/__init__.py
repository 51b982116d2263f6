"""Core domain: value variants, the scene tree arena and the error taxonomy."""
