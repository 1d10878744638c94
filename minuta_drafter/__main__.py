"""Entry point for `python -m minuta_drafter`"""

from minuta_drafter.cli.main import app

app()
