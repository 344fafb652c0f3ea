"""Allow ``python -m entra_secret_cleanup``."""

from .main import main

main()
