"""Implementation of the 'run' command.

The run command executes one configured workflow, either for real or as
a dry run that only reports what would change.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from release_engine.cli.logging import configure_logging
from release_engine.config import find_config_file, load_config
from release_engine.exceptions import ReleaseEngineError, format_diagnostic
from release_engine.workflow import RunType, State

if TYPE_CHECKING:
    from rich.console import Console

    from release_engine.core.changes import CommitClassifier


def run_workflow_command(
    path: str | None,
    workflow_name: str,
    dry_run: bool,
    console: Console,
    err_console: Console,
    *,
    prerelease_label: str | None = None,
    classifier: CommitClassifier | None = None,
    verbose: bool = False,
) -> int:
    """Run a configured workflow.

    Args:
        path: Optional path to project directory
        workflow_name: Name of the workflow to run
        dry_run: Only report what would change
        console: Console for standard output
        err_console: Console for error output
        prerelease_label: Override the label of PrepareRelease steps
        classifier: Source of classified changes for PrepareRelease
        verbose: Log every step

    Returns:
        Process exit code
    """
    configure_logging(verbose, err_console)
    project_path = Path(path) if path else Path.cwd()
    sink = io.StringIO() if dry_run else None

    try:
        config_path = find_config_file(project_path)
        config = load_config(config_path)
        root = config_path.parent
        workflow = config.build_workflow(workflow_name)
        if prerelease_label:
            workflow = workflow.with_prerelease_label(prerelease_label)

        state = State(packages=config.build_packages(root), root=root, classifier=classifier)
        run_type = RunType.dry(state, sink) if sink is not None else RunType.real(state)

        mode_str = "[yellow]DRY-RUN[/]" if dry_run else "[green]EXECUTING[/]"
        console.print(f"\n{mode_str} - Running workflow [cyan]{escape(workflow.name)}[/]\n")

        result = workflow.run(run_type)
    except ReleaseEngineError as e:
        err_console.print(
            Panel(
                Text(format_diagnostic(e)),
                title=f"[red]Error ({escape(e.category)})[/]",
                border_style="red",
            )
        )
        return 1

    if sink is not None:
        console.print(
            Panel(
                Text.assemble(
                    ("Would make the following changes:", "bold"),
                    "\n\n",
                    sink.getvalue().rstrip(),
                ),
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        return 0

    release = result.state.release
    summary = (
        f"[green]Prepared release {escape(str(release.version))}![/]"
        if release is not None
        else f"[green]Workflow {escape(workflow.name)} completed.[/]"
    )
    console.print(Panel(summary, title="[green]Done[/]", border_style="green"))
    return 0
