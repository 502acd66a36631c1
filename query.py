#!/usr/bin/env python3
"""Ad hoc query runner for the recipe finder.

Run service operations directly against the configured database.

Usage:
    python query.py [--url CSV_URL] init-db          # Reset the database and import the CSV dataset
    python query.py search "pasta"                   # Free-text search
    python query.py pantry chicken rice garlic       # Recipes you can make with these ingredients
    python query.py similar 42                       # Recipes similar to recipe 42
    python query.py recipe 42                        # Show one recipe
    python query.py categories                       # List categories
    python query.py authors                          # Most prolific authors
    python query.py --debug --limit 3 pantry eggs    # Full JSON output, at most 3 results

Flags (before the command):
- --debug: print the full JSON result instead of a table
- --limit N: maximum number of results
- --url URL: CSV location for init-db (default: RECIPES_CSV_URL)
"""

import asyncio
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table

from src.loaders.csv_import import initialize_database
from src.models.models import PaginatedResult, Recipe, RecipeSearchOptions, ScoredRecipe
from src.services.recipe_service import RecipeService
from src.store.errors import RecipeNotFoundError, StoreUnavailableError
from src.store.recipe_store import RecipeStore
from src.utils.config import config
from src.utils.logger import logger
from src.utils.serialization import serialize_for_wire

console = Console()

COMMANDS = ("init-db", "search", "pantry", "similar", "recipe", "categories", "authors")


def recipes_table(title: str, recipes: list[Recipe]) -> Table:
    """Render recipes as a table; scored recipes get match columns."""
    scored = bool(recipes) and isinstance(recipes[0], ScoredRecipe)
    table = Table(title=title)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Category")
    table.add_column("Rating", justify="right")
    if scored:
        table.add_column("Match %", justify="right", style="green")
        table.add_column("Missing", justify="right", style="yellow")

    for recipe in recipes:
        row = [
            str(recipe.id),
            recipe.title,
            recipe.category or "-",
            f"{recipe.rating:.1f}" if recipe.rating is not None else "-",
        ]
        if scored:
            row += [f"{recipe.match_percentage:.1f}", str(recipe.missing_ingredients_count)]
        table.add_row(*row)
    return table


def show_recipe(recipe: Recipe) -> None:
    console.print(f"[bold cyan]#{recipe.id}[/bold cyan] [bold]{recipe.title}[/bold]")
    for label, value in (
        ("Category", recipe.category),
        ("Author", recipe.author),
        ("Rating", recipe.rating),
        ("Cook time", recipe.cook_time),
        ("Total time", recipe.total_time),
    ):
        if value is not None:
            console.print(f"[dim]{label}:[/dim] {value}")
    console.print("\n[bold]Ingredients[/bold]")
    console.print(recipe.ingredients or "-")
    console.print("\n[bold]Directions[/bold]")
    console.print(recipe.directions or "-")


async def run_command(command: str, args: list[str], debug: bool, limit: Optional[int], csv_url: Optional[str]):
    """Execute one command against a freshly connected store."""
    async with RecipeStore() as store:
        service = RecipeService(store)

        if command == "init-db":
            total = await initialize_database(store, csv_url=csv_url)
            console.print(f"[green]✓ Database ready with {total} recipe(s)[/green]")
            return

        if command == "search":
            limit = config.DEFAULT_PAGE_SIZE if limit is None else limit
            if limit <= 0:
                page = PaginatedResult[Recipe].empty()
            else:
                page = await service.search_recipes(RecipeSearchOptions(search_term=" ".join(args) or None, limit=limit))
            if debug:
                console.print_json(data=serialize_for_wire(page))
                return
            console.print(recipes_table(f"{page.total} recipe(s), page {page.page}/{page.total_pages}", page.data))
            return

        if command == "pantry":
            recipes = await service.find_by_available_ingredients(args, limit=limit)
            title = f"Recipes with {', '.join(args)}"
        elif command == "similar":
            recipes = await service.find_similar(int(args[0]), limit=limit)
            title = f"Recipes similar to #{args[0]}"
        elif command == "recipe":
            recipe = await service.get_recipe_by_id(int(args[0]))
            if debug:
                console.print_json(data=serialize_for_wire(recipe))
            else:
                show_recipe(recipe)
            return
        elif command == "categories":
            categories = await service.get_available_categories()
            if debug:
                console.print_json(data=categories)
            else:
                console.print("\n".join(categories))
            return
        else:
            authors = await service.get_popular_authors(limit)
            if debug:
                console.print_json(data=serialize_for_wire(authors))
                return
            table = Table(title="Popular authors")
            table.add_column("Author")
            table.add_column("Recipes", justify="right")
            for entry in authors:
                table.add_row(entry.author, str(entry.count))
            console.print(table)
            return

        if debug:
            console.print_json(data=serialize_for_wire(recipes))
        elif recipes:
            console.print(recipes_table(title, recipes))
        else:
            console.print("[yellow]No matching recipes[/yellow]")


def print_usage() -> None:
    print("Usage: python query.py [--debug] [--limit N] <command> [args...]")
    print("")
    print(f"Commands: {', '.join(COMMANDS)}")
    print("")
    print("Examples:")
    print("  python query.py init-db")
    print("  python query.py search \"chocolate cake\"")
    print("  python query.py pantry chicken rice garlic")
    print("  python query.py --limit 3 similar 42")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    debug_mode = False
    limit_arg: Optional[int] = None
    csv_url_arg: Optional[str] = None
    argv_start = 1

    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        flag = sys.argv[argv_start]
        if flag == "--debug":
            debug_mode = True
            argv_start += 1
        elif flag in ("--limit", "--url"):
            argv_start += 1
            if argv_start >= len(sys.argv):
                print(f"Error: {flag} flag requires a value")
                sys.exit(1)
            if flag == "--limit":
                if not sys.argv[argv_start].lstrip("-").isdigit():
                    print("Error: --limit requires an integer")
                    sys.exit(1)
                limit_arg = int(sys.argv[argv_start])
            else:
                csv_url_arg = sys.argv[argv_start]
            argv_start += 1
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    if argv_start >= len(sys.argv) or sys.argv[argv_start] not in COMMANDS:
        print("Error: missing or unknown command")
        print_usage()
        sys.exit(1)

    command_name = sys.argv[argv_start]
    command_args = sys.argv[argv_start + 1:]
    if command_name in ("similar", "recipe") and (not command_args or not command_args[0].isdigit()):
        print(f"Error: {command_name} requires a numeric recipe id")
        sys.exit(1)

    try:
        asyncio.run(run_command(command_name, command_args, debug_mode, limit_arg, csv_url_arg))
    except KeyboardInterrupt:
        logger.info("Query interrupted by user.")
        sys.exit(0)
    except RecipeNotFoundError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)
    except StoreUnavailableError as e:
        logger.error(f"Recipe store unavailable: {e}")
        sys.exit(2)
    except Exception as e:
        logger.error(f"Query execution failed: {e}", exc_info=True)
        sys.exit(1)
