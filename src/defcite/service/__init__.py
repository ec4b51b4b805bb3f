"""FastAPI service (``defcite.service.app``) and command-line tool (``defcite.service.cli``)."""
