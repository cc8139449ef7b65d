# src/passoff/cli.py

from pathlib import Path

import typer

from passoff.aggregation import aggregate, extra_credit_scores
from passoff.api import grade_submission_file
from passoff.errors import PassoffError
from passoff.io.artifacts import write_submission_artifacts
from passoff.logging import configure_logging
from passoff.settings import get_settings
from passoff.utils import load_test_tree

app = typer.Typer(help="passoff — rubric scoring for graded programming submissions.")


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (default from settings)."
    ),
) -> None:
    configure_logging(log_level or get_settings().log_level)


@app.command("grade")
def grade_cmd(
    request_file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        help="YAML/JSON grading request.",
    ),
    artifacts: Path = typer.Option(
        None, "--artifacts", "-a", help="Artifacts output directory (default from settings)."
    ),
    no_artifacts: bool = typer.Option(False, "--no-artifacts", help="Do not write artifacts."),
) -> None:
    """
    Grade one submission and print its rubric. Exits 1 when the rubric did not pass.
    """
    try:
        outcome = grade_submission_file(request_file)
    except PassoffError as e:
        typer.echo(f"Error while grading {request_file}: {e}", err=True)
        raise typer.Exit(code=2)

    sub = outcome.submission
    if sub.rubric is not None:
        for rubric_type, item in sub.rubric.items.present():
            r = item.results
            typer.echo(f"{rubric_type.value:<14} {r.score:>7.2f} / {r.possible_points:<7g} {item.category}")
    status = "PASS ✅" if sub.passed else "FAIL ❌"
    typer.echo(f"[{sub.net_id} {sub.phase.value}] {status}  score={sub.score:g}")
    if not outcome.commit_verification.verified:
        typer.echo(outcome.commit_verification.message, err=True)

    if not no_artifacts:
        out_dir = artifacts or Path(get_settings().artifacts_dir)
        try:
            written = write_submission_artifacts(out_dir, sub)
        except PassoffError as e:
            typer.echo(f"Error while writing artifacts for {request_file}: {e}", err=True)
            raise typer.Exit(code=2)
        typer.echo(f"Artifacts: {written}")

    raise typer.Exit(code=0 if sub.passed else 1)


@app.command("tree")
def tree_cmd(
    tree_file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        help="YAML/JSON test tree.",
    ),
) -> None:
    """
    Aggregate a test tree and print its counters.
    """
    try:
        root = aggregate(load_test_tree(tree_file))
    except PassoffError as e:
        typer.echo(f"Error in {tree_file}: {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(
        f"{root.name}: passed={root.num_tests_passed} failed={root.num_tests_failed} "
        f"extra_credit_passed={root.num_extra_credit_passed} "
        f"extra_credit_failed={root.num_extra_credit_failed}"
    )
    for category, fraction in sorted(extra_credit_scores(root).items()):
        typer.echo(f"  extra credit {category}: {fraction:.0%}")
