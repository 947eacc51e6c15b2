"""Minimal typer CLI used as a reference for command layout."""

import typer

app = typer.Typer(add_completion=False)


@app.command()
def greet(name: str, shout: bool = typer.Option(False, help="Upper-case the greeting.")) -> None:
    message = f"Hello, {name}!"
    typer.echo(message.upper() if shout else message)


if __name__ == "__main__":
    app()
