"""
Terminal output for pipeline runs.

Standard format:
  Start:    ▶️  {stage}: {description}
  Skipped:  ⏭️  {stage}: reusing {artifact}
  Complete: ✅ {stage}: {succeeded}/{total}         ({time}) {failed} failed
  Error:    ❌ {stage}: {error}
"""

from typing import List, Optional
from rich.console import Console
from rich.table import Table
from rich.text import Text

from infra.pipeline.schemas import BatchStats, PipelineRun, StageState


DESCRIPTION_WIDTH = 45

_STATE_STYLES = {
    StageState.DONE: "green",
    StageState.SKIPPED: "dim",
    StageState.RUNNING: "yellow",
    StageState.PENDING: "dim",
}


def _console() -> Console:
    return Console()


def format_stage_start(stage_name: str, description: str = "") -> Text:
    text = Text()
    text.append("▶️  ", style="cyan")
    text.append(stage_name, style="bold")
    if description:
        text.append(f": {description}", style="")
    return text


def format_stage_skipped(stage_name: str, artifact: Optional[str] = None) -> Text:
    text = Text()
    text.append("⏭️  ", style="dim")
    text.append(f"{stage_name}: skipped", style="dim")
    if artifact:
        text.append(f" (reusing {artifact})", style="dim")
    return text


def format_stage_complete(stage_name: str, stats: BatchStats) -> Text:
    """
    Format a stage completion line.

    Output: ✅ {stage}: {succeeded}/{total}         ({time}) {failed} failed
    """
    failed_style = "red" if stats.failed else "dim"
    text = Text()
    text.append("✅ ", style="green")

    description = f"{stage_name}: {stats.succeeded}/{stats.total}"
    text.append(f"{description:<{DESCRIPTION_WIDTH}}", style="")

    text.append(f"({stats.elapsed_seconds:6.1f}s)", style="dim")
    text.append(f" {stats.failed} failed", style=failed_style)
    return text


def format_stage_error(stage_name: str, error_message: str) -> Text:
    text = Text()
    text.append("❌ ", style="red")
    text.append(f"{stage_name}: {error_message}", style="")
    return text


def print_pipeline_banner(run_id: str, stage_names: List[str], skipped: List[str]):
    console = _console()
    active = [name for name in stage_names if name not in skipped]
    console.print(Text(f"\n📸 Running pipeline: {run_id}", style="bold"))
    console.print(f"   Stages: {', '.join(active) if active else '(none)'}")
    if skipped:
        console.print(f"   Skipping: {', '.join(skipped)}", style="dim")
    console.print()


def print_stage_start(stage_name: str, description: str = ""):
    _console().print(format_stage_start(stage_name, description))


def print_stage_skipped(stage_name: str, artifact: Optional[str] = None):
    _console().print(format_stage_skipped(stage_name, artifact))


def print_stage_complete(stage_name: str, stats: BatchStats):
    _console().print(format_stage_complete(stage_name, stats))


def print_stage_error(stage_name: str, error_message: str):
    _console().print(format_stage_error(stage_name, error_message))


def build_summary_table(run: PipelineRun) -> Table:
    table = Table(title=f"Pipeline {run.run_id}")
    table.add_column("Stage")
    table.add_column("State")
    table.add_column("Succeeded", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("Artifact", overflow="fold")

    for outcome in run.stages:
        executed = outcome.state == StageState.DONE
        table.add_row(
            outcome.name,
            Text(outcome.state.value, style=_STATE_STYLES[outcome.state]),
            str(outcome.succeeded) if executed else "-",
            str(outcome.failed) if executed else "-",
            f"{outcome.duration_seconds:.1f}s" if executed else "-",
            str(outcome.artifact) if outcome.artifact else "",
        )
    return table


def print_run_summary(run: PipelineRun):
    console = _console()
    console.print()
    console.print(build_summary_table(run))
