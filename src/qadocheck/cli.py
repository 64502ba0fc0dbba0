"""Command line interface for :mod:`qadocheck`."""

import sys
from typing import Optional

import click

from .config import CheckConfig
from .errors import FetchError
from .runner import evaluate_candidates
from .store import QadoStore
from .version import VERSION

__all__ = [
    "main",
]


@click.command()
@click.version_option(version=VERSION)
@click.argument("fetch_url")
@click.argument("update_url")
@click.option(
    "--exact-class",
    is_flag=True,
    help="Check queries of questions typed exactly qado:Question instead of its subclasses",
)
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Number of worker threads")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(
    fetch_url: str,
    update_url: str,
    exact_class: bool,
    workers: Optional[int],
    verbose: bool,
) -> None:
    """Check the SPARQL queries of a QADO triplestore.

    Every query found at FETCH_URL is run against the public knowledge
    graphs; the outcome is written back through UPDATE_URL.


    Example:
      qadocheck http://localhost:7200/repositories/qado \\
        http://localhost:7200/repositories/qado/statements
    """
    import logging

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            force=True,
        )
        logging.getLogger("qadocheck").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s", force=True)

    config = CheckConfig.from_env(
        fetch_url, update_url, workers=workers, exact_class=exact_class
    )

    with QadoStore.from_config(config) as store:
        try:
            candidates = store.fetch_candidates()
        except FetchError as e:
            click.echo(f"Error: {e}", err=True)
            raise click.Abort()

        click.echo(f"Found {len(candidates)} queries to check")
        with click.progressbar(length=len(candidates), label="Checking queries") as bar:
            summary = evaluate_candidates(config, candidates, store, progress=bar.update)

    click.echo(
        f"Succeeded: {summary.succeeded}  Failed: {summary.failed}  "
        f"Unresolved: {summary.unresolved}  Not stored: {summary.write_errors}"
    )
    if summary.write_errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
