"""
easygit CLI - Sync command.

Reconciles the current branch with its remote counterpart: pushes,
rebases or merges as needed, asks how to proceed when history has
diverged, and queues the sync when the remote cannot be reached.
"""

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from easygit.cli.errors import (
    ExitCode,
    print_error,
    print_git_error,
    print_not_git_repo_error,
    print_stash_warnings,
    print_sync_error,
)
from easygit.core.config import ConfigStrategyStore
from easygit.core.queue import OfflineQueueReader
from easygit.core.repository import GitError, GitRepository
from easygit.core.sync import (
    BranchNotCheckedOut,
    ConfigError,
    DivergedState,
    DivergenceChoice,
    DryRunPlan,
    EasyGitError,
    ForceMode,
    Integrated,
    Pushed,
    PushMode,
    Queued,
    ReconciliationRequest,
    Strategy,
    StrategyOverride,
    SyncOutcome,
    UpToDate,
    UserCancelled,
)
from easygit.core.sync.service import ReconciliationService

console = Console()
app = typer.Typer(
    name="sync",
    help="Synchronize the current branch with its remote",
    no_args_is_help=False,
)

DIVERGENCE_OPTIONS: list[tuple[DivergenceChoice, str]] = [
    (DivergenceChoice.REBASE, "Rebase local commits onto remote (linear history)"),
    (DivergenceChoice.MERGE, "Merge remote changes (creates a merge commit)"),
    (DivergenceChoice.FORCE_WITH_LEASE, "Force push with lease (discards remote commits)"),
    (DivergenceChoice.CANCEL, "Cancel and resolve manually"),
]


class RichSyncCallback:
    """Rich Console-based implementation of SyncEventCallback."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def on_progress(self, message: str) -> None:
        self.console.print(f"[cyan]→[/cyan] {message}")

    def on_status(self, message: str, level: str = "info") -> None:
        """Display status message with appropriate styling."""
        if level == "success":
            self.console.print(f"[green]✓[/green] {message}")
        elif level == "warning":
            self.console.print(f"[yellow]⚠[/yellow]  {message}")
        elif level == "error":
            self.console.print(f"[red]✗[/red] {message}")
        else:
            self.console.print(message)

    def on_info(self, message: str) -> None:
        self.console.print(f"[dim]{message}[/dim]")


class TerminalPrompter:
    """
    Asks divergence questions on the terminal.

    Ctrl+C or EOF at a prompt surfaces as UserCancelled, so the stash
    bracket attaches any restore warning to it.
    """

    def __init__(self, console: Console) -> None:
        self.console = console

    def choose_divergence(self, state: DivergedState) -> str:
        """Show the numbered menu until a valid option is picked."""
        self.console.print()
        self.console.print("[bold]How do you want to reconcile?[/bold]")
        for i, (_choice, label) in enumerate(DIVERGENCE_OPTIONS, 1):
            self.console.print(f"  {i}. {label}")

        while True:
            try:
                selected = typer.prompt("Select an option", type=int)
            except typer.Abort as e:
                raise UserCancelled() from e
            if 1 <= selected <= len(DIVERGENCE_OPTIONS):
                return DIVERGENCE_OPTIONS[selected - 1][0].value
            self.console.print(
                f"[red]Please enter a number between 1 and {len(DIVERGENCE_OPTIONS)}[/red]"
            )

    def confirm_force_push(self, state: DivergedState) -> bool:
        try:
            return typer.confirm(
                f"Overwrite {state.remote_branch_ref}? "
                f"{state.behind} remote commit(s) will be lost",
                default=False,
            )
        except typer.Abort as e:
            raise UserCancelled("Force push cancelled by user") from e


def build_request(
    remote: str,
    branch: str | None = None,
    rebase: bool = False,
    merge: bool = False,
    force: bool = False,
    force_with_lease: bool = False,
    dry_run: bool = False,
    allow_unrelated: bool = False,
) -> ReconciliationRequest:
    """
    Translate command-line flags into a request.

    --rebase wins over --merge, and --force-with-lease wins over --force.
    """
    if rebase:
        strategy_override = StrategyOverride.REBASE
    elif merge:
        strategy_override = StrategyOverride.MERGE
    else:
        strategy_override = StrategyOverride.NONE

    if force_with_lease:
        force_mode = ForceMode.FORCE_WITH_LEASE
    elif force:
        force_mode = ForceMode.FORCE
    else:
        force_mode = ForceMode.NONE

    return ReconciliationRequest(
        remote_name=remote,
        branch_name=branch,
        strategy_override=strategy_override,
        force_mode=force_mode,
        dry_run=dry_run,
        allow_unrelated_histories=allow_unrelated,
    )


def render_outcome(outcome: SyncOutcome) -> None:
    """Print the final summary line(s) for a completed sync."""
    console.print()

    if isinstance(outcome, UpToDate):
        console.print(
            f"[green]✓[/green] {outcome.current_branch} is up to date with "
            f"{outcome.remote_branch_ref}"
        )
    elif isinstance(outcome, Pushed):
        ref = outcome.remote_branch_ref
        line = f"[green]✓[/green] Pushed {outcome.count} commit(s) to {ref}"
        if outcome.mode != PushMode.NORMAL:
            line += f" [yellow]({outcome.mode.value})[/yellow]"
        if outcome.upstream_set:
            line += " and set upstream"
        console.print(line)
    elif isinstance(outcome, Integrated):
        verb = "Rebased onto" if outcome.strategy == Strategy.REBASE else "Merged"
        ref = outcome.remote_branch_ref
        line = f"[green]✓[/green] {verb} {outcome.count} commit(s) from {ref}"
        if outcome.pushed:
            line += " and pushed"
        console.print(line)
    elif isinstance(outcome, Queued):
        if outcome.persisted:
            console.print(f"[yellow]○[/yellow] Sync queued as {outcome.operation_id}")
            console.print(f"[dim]Queue: {outcome.queue_path}[/dim]")
            console.print("[dim]Run easygit sync again once you are back online.[/dim]")
        else:
            print_error(
                "Remote unreachable and the sync could not be queued",
                reason=f"Writing to {outcome.queue_path} failed",
                solution="easygit sync  # re-run once the network is back",
            )
    elif isinstance(outcome, DryRunPlan):
        _render_plan(outcome)

    print_stash_warnings(outcome.warnings)


def _render_plan(plan: DryRunPlan) -> None:
    state = plan.state
    console.print("[bold]Dry run[/bold] [dim](nothing will be changed)[/dim]")
    console.print(f"Branch: {state.current_branch} → {state.remote_branch_ref}")
    console.print(f"State: [cyan]{state.classification.value}[/cyan]")
    if state.ahead_count or state.behind_count:
        console.print(f"Ahead: {state.ahead_count}  Behind: {state.behind_count}")
    console.print(f"Strategy: {plan.strategy.value}")
    if not plan.fetched:
        console.print("[yellow]⚠[/yellow]  Remote unreachable; based on the last fetch")

    console.print()
    console.print("[bold]Planned actions:[/bold]")
    for i, action in enumerate(plan.actions, 1):
        console.print(f"  {i}. {action}")


@app.callback(invoke_without_command=True)
def sync(
    ctx: typer.Context,
    remote: str | None = typer.Option(
        None,
        "--remote",
        "-r",
        help="Remote to sync with (default: core.default_remote, then origin)",
    ),
    branch: str | None = typer.Option(
        None,
        "--branch",
        "-b",
        help="Branch to sync (default: current branch)",
    ),
    rebase: bool = typer.Option(
        False,
        "--rebase",
        help="Rebase onto remote commits when behind",
    ),
    merge: bool = typer.Option(
        False,
        "--merge",
        help="Merge remote commits when behind",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Force push when ahead (overwrites remote history)",
    ),
    force_with_lease: bool = typer.Option(
        False,
        "--force-with-lease",
        help="Force push when ahead, unless the remote moved",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would happen without changing anything",
    ),
    allow_unrelated: bool = typer.Option(
        False,
        "--allow-unrelated",
        help="Allow merging unrelated histories",
    ),
) -> None:
    """
    Sync the current branch with its remote.

    Detects whether the branch is up to date, ahead, behind, diverged, or
    not yet on the remote, and does the matching thing. Uncommitted changes
    are stashed and restored around rebases and merges.

    Examples:
        easygit sync                    # Push, pull, or ask as needed
        easygit sync --merge            # Merge instead of rebase when behind
        easygit sync --dry-run          # Show the plan only
        easygit sync -r upstream        # Sync with another remote
        easygit sync queue              # List syncs queued while offline
    """
    # If a subcommand was invoked, don't run the default action
    if ctx.invoked_subcommand is not None:
        return

    config_store = ConfigStrategyStore()
    try:
        default_remote = config_store.get_default_remote()
    except ValidationError as e:
        print_error(
            "Invalid easygit configuration",
            reason=str(e).splitlines()[0],
            solution="Check .easygit/config.json and ~/.config/easygit/config.json",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    request = build_request(
        remote or default_remote,
        branch=branch,
        rebase=rebase,
        merge=merge,
        force=force,
        force_with_lease=force_with_lease,
        dry_run=dry_run,
        allow_unrelated=allow_unrelated,
    )

    try:
        repo = GitRepository()
    except GitError:
        print_not_git_repo_error()
        raise typer.Exit(ExitCode.USER_ERROR)

    service = ReconciliationService(
        repo,
        TerminalPrompter(console),
        callback=RichSyncCallback(console),
        config_store=config_store,
    )

    try:
        outcome = service.reconcile(request)
    except UserCancelled as e:
        console.print(f"[yellow]{e}[/yellow]")
        if e.reason:
            console.print(f"[dim]{e.reason}[/dim]")
        print_stash_warnings(e.warnings)
        raise typer.Exit(ExitCode.CANCELLED)
    except (ConfigError, BranchNotCheckedOut) as e:
        print_sync_error(e)
        raise typer.Exit(ExitCode.USER_ERROR)
    except EasyGitError as e:
        print_sync_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except GitError as e:
        print_git_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except typer.Abort:
        # Ctrl+C or EOF at a prompt
        console.print("\n[yellow]Sync cancelled by user[/yellow]")
        raise typer.Exit(ExitCode.CANCELLED)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(ExitCode.SIGINT)

    render_outcome(outcome)

    if isinstance(outcome, Queued) and not outcome.persisted:
        raise typer.Exit(ExitCode.GENERAL_ERROR)


@app.command()
def queue(
    operation_id: str | None = typer.Option(
        None,
        "--id",
        help="Show only the operation with this ID",
    ),
) -> None:
    """
    List syncs queued while the remote was unreachable.

    Examples:
        easygit sync queue
        easygit sync queue --id 3f2a9c1e
    """
    reader = OfflineQueueReader()

    if operation_id is not None:
        operation = reader.get_operation(operation_id)
        if operation is None:
            print_error(
                f"No queued sync operation with ID {operation_id}",
                reason=f"Queue: {reader.queue_path}",
                solution="easygit sync queue  # list all queued operations",
            )
            raise typer.Exit(ExitCode.USER_ERROR)
        operations = [operation]
    else:
        operations = reader.list_operations()

    if not operations:
        console.print("[dim]No queued sync operations[/dim]")
        return

    table = Table(title=f"Queued syncs ({reader.queue_path})")
    table.add_column("ID", style="cyan")
    table.add_column("Queued at")
    table.add_column("Branch")
    table.add_column("Remote")
    table.add_column("Repository", style="dim")

    for op in operations:
        table.add_row(
            op.id,
            op.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            op.branch,
            op.request.remote_name,
            op.working_directory,
        )

    console.print(table)


__all__ = ["app"]
