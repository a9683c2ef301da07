from s2i_scaffold.cli.main import app

app(prog_name="s2i-scaffold")
