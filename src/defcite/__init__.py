"""Find, paraphrase and cite keyword definitions in academic documents."""

__version__ = "0.1.0"
