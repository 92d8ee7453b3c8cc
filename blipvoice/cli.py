import json
from typing import List

import httpx
import typer

app = typer.Typer(help="Talk to a running Blip Voice call service.")

DEFAULT_URL = "http://localhost:3000"


def _fail(response: httpx.Response) -> None:
    typer.echo(f"Request failed ({response.status_code}): {response.text}", err=True)
    raise typer.Exit(code=1)


@app.command("start-call")
def start_call(number: str, url: str = DEFAULT_URL):
    response = httpx.post(f"{url.rstrip('/')}/start-call", json={"phone_number": number}, timeout=30.0)
    if response.is_error:
        _fail(response)
    typer.echo(f"Call started: {response.json().get('id')}")


@app.command()
def campaign(numbers: List[str], url: str = DEFAULT_URL):
    response = httpx.post(f"{url.rstrip('/')}/campaigns", json={"numbers": numbers}, timeout=None)
    if response.is_error:
        _fail(response)
    data = response.json()
    for result in data["results"]:
        outcome = result.get("callId") or f"error: {result.get('error')}"
        typer.echo(f"{result['number']}\t{outcome}")
    typer.echo(f"{data['started']} started, {data['failed']} failed")


@app.command()
def summary(url: str = DEFAULT_URL):
    response = httpx.get(f"{url.rstrip('/')}/dashboard/summary", timeout=10.0)
    if response.is_error:
        _fail(response)
    typer.echo(json.dumps(response.json(), indent=2))


if __name__ == "__main__":
    app()
