from pyslopes.cli import app

app(prog_name="pyslopes")
