# trustkeys/cli/main.py

import typer

from trustkeys.cli.keys.trust import keys_trust
from trustkeys.cli.keys.list import keys_list


app = typer.Typer(
    name="trustkeys-cli",
    help="A command-line tool for trusting OpenPGP signing keys on first use."
)

app.command("trust")(keys_trust)
app.command("list")(keys_list)


def main():
    app()

if __name__ == "__main__":
    main()
