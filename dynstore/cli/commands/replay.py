"""
Replay command: Replay an action log through a fresh store
"""

import json
import typer
from typing import Optional
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from dynstore.core import DynamicStore
from dynstore.replay import load_reducers, read_actions, replay

console = Console()


def replay_command(
    actions_path: str = typer.Argument(..., help="Path to JSONL action log"),
    reducers: str = typer.Option(..., "--reducers", "-r", help="Reducer mapping as module:attribute"),
    preload: Optional[str] = typer.Option(None, "--preload", "-p", help="JSON file with preloaded state"),
    until: Optional[int] = typer.Option(None, "--until", "-u", help="Replay at most N actions"),
    show_state: bool = typer.Option(False, "--show-state", "-s", help="Show final state"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Replay an action log and report the resulting state.

    Examples:
        dynstore replay actions.jsonl -r myapp.reducers:REDUCERS
        dynstore replay actions.jsonl -r myapp.reducers:build --until 10
        dynstore replay actions.jsonl -r myapp.reducers:REDUCERS --show-state --json
    """
    store = None
    try:
        preloaded = None
        if preload:
            with open(preload, "r", encoding="utf-8") as f:
                preloaded = json.load(f)
            if not isinstance(preloaded, dict):
                raise ValueError(f"Preloaded state must be a JSON object: {preload}")

        store = DynamicStore(preloaded, load_reducers(reducers), name=actions_path)

        if not json_output:
            console.print("[bold]Replaying action log...[/bold]")

        result = replay(store, read_actions(actions_path), until=until)

        if json_output:
            output = {
                "success": True,
                "actions_replayed": result.applied,
                "notifications": result.notifications,
                "action_counts": result.counts,
            }
            if show_state:
                output["state"] = result.state
            print(json.dumps(output, indent=2, default=repr))
        else:
            console.print(f"[green]✓ Replayed {result.applied} actions successfully[/green]")
            console.print(f"  Listener notifications: [cyan]{result.notifications}[/cyan]")

            table = Table(title="Action Counts")
            table.add_column("Action Type", style="green")
            table.add_column("Count", style="cyan", justify="right")

            for type_ in sorted(result.counts):
                table.add_row(type_, str(result.counts[type_]))

            console.print(table)

            if show_state:
                console.print("\n[bold]Final State:[/bold]")
                syntax = Syntax(json.dumps(result.state, indent=2, default=repr), "json", theme="monokai")
                console.print(syntax)

    except FileNotFoundError as e:
        if json_output:
            print(json.dumps({"error": "File not found", "path": e.filename}))
        else:
            console.print(f"[red]Error: File not found:[/red] {e.filename}")
        raise typer.Exit(2)
    except Exception as e:
        if json_output:
            print(json.dumps({"error": str(e)}))
        else:
            console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)
    finally:
        if store is not None:
            store.destroy()
