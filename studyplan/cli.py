"""CLI entrypoint (Typer).

Commands:
- `studyplan serve`         run the HTTP API
- `studyplan generate ...`  generate one plan locally
- `studyplan check-models`  probe the configured providers
- `studyplan template ...`  print the template plan
"""

from __future__ import annotations

import asyncio

import typer

from studyplan.config import configure_logging, get_settings
from studyplan.schemas import PlanRequest
from studyplan.agent.fallback import render_fallback_plan
from studyplan.agent.workflow import PlanOrchestrator
from studyplan.database.session import Database
from studyplan.database.store import PlanStore, StoreError
from studyplan.llm.router import ProviderClient

app = typer.Typer(help="Study plan generator CLI.")


@app.command()
def serve(
    host: str = typer.Option(None, help="Bind address (defaults to API_HOST)"),
    port: int = typer.Option(None, help="Port (defaults to API_PORT / PORT)"),
    reload: bool = typer.Option(False, help="Auto-reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "studyplan.api.main:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


@app.command()
def generate(
    subject: str = typer.Option(..., help="Subject to study"),
    level: str = typer.Option(..., help="Academic level"),
    duration: str = typer.Option(..., help="Duration, e.g. '6 weeks'"),
    goals: str = typer.Option(..., help="Learning goals"),
    save: bool = typer.Option(False, "--save/--no-save", help="Store the plan in the database"),
):
    """Generate one study plan and print it."""
    settings = get_settings()
    configure_logging(settings)
    request = PlanRequest(subject=subject, level=level, duration=duration, goals=goals)

    async def _run():
        client = ProviderClient(settings)
        try:
            result = await PlanOrchestrator(client, settings).generate(request)
        finally:
            await client.close()

        plan_id = None
        if save:
            database = Database.from_settings(settings)
            try:
                await database.init()
                plan_id = await PlanStore(database).save(request, result)
            except StoreError as e:
                typer.echo(f"Plan not saved: {e}", err=True)
            finally:
                await database.close()
        return result, plan_id

    result, plan_id = asyncio.run(_run())

    typer.echo(result.plan)
    typer.echo("")
    typer.echo(f"Model used: {result.model_used}")
    if plan_id:
        typer.echo(f"Saved as {plan_id}")


@app.command("check-models")
def check_models():
    """Probe every configured provider."""
    settings = get_settings()

    async def _run() -> dict[str, str]:
        client = ProviderClient(settings)
        try:
            return {provider: await client.probe(provider) for provider in settings.providers}
        finally:
            await client.close()

    for provider, status in asyncio.run(_run()).items():
        typer.echo(f"{provider}: {status}")


@app.command()
def template(
    subject: str = typer.Option(..., help="Subject to study"),
    level: str = typer.Option(..., help="Academic level"),
    duration: str = typer.Option(..., help="Duration, e.g. '6 weeks'"),
    goals: str = typer.Option(..., help="Learning goals"),
):
    """Print the template plan used when no model is available."""
    typer.echo(render_fallback_plan(subject, level, duration, goals))


if __name__ == "__main__":
    app()
