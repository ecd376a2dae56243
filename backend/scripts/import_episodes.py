#!/usr/bin/env python3
"""
Import an episodes export document into the configured store.

Usage:
    python scripts/import_episodes.py <export.json> [--backend database|local]

Example:
    python scripts/import_episodes.py ~/Downloads/episodes-export-2024-06-01.json
"""
import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from podsite.exceptions import PartialImportFailure, PodsiteError
from podsite.schemas.transfer import ImportDocument
from podsite.services.transfer import import_document
from podsite.stores import SUPPORTED_BACKENDS, create_episode_store

console = Console()


def main() -> int:
    parser = argparse.ArgumentParser(description="Import an episodes export document")
    parser.add_argument("file", type=Path, help="Export document (JSON)")
    parser.add_argument("--backend", choices=SUPPORTED_BACKENDS, default=None,
                        help="Store backend (defaults to storage.backend in config.yaml)")
    args = parser.parse_args()

    try:
        with open(args.file, "r", encoding="utf-8") as f:
            document = ImportDocument.model_validate(json.load(f))
    except (OSError, ValueError, ValidationError) as e:
        console.print(f"[red]Invalid import file: {e}[/red]")
        return 1

    store = create_episode_store(args.backend)
    console.print(f"Importing {len(document.episodes)} episodes from [bold]{args.file}[/bold]...")

    try:
        result = import_document(store, document)
    except PartialImportFailure as e:
        result = e.result
    except PodsiteError as e:
        console.print(f"[red]Import failed: {e.message}[/red]")
        return 1

    if result.errors:
        table = Table(title="Rejected episodes")
        table.add_column("Slug", style="cyan")
        table.add_column("Reason", style="red")
        for error in result.errors:
            table.add_row(error.slug, error.message)
        console.print(table)

    console.print(f"[green]Imported {result.imported_count} episodes[/green]")
    return 0 if result.ok else 2


if __name__ == "__main__":
    sys.exit(main())
