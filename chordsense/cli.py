"""Command-line interface for chordsense.

Provides commands for:
- detect: Recognize the chord in a short recording
- notes: Show detected frequencies and pitch classes
- identify: Name the chord formed by a list of notes
- chord: Look up a chord's notes and intervals
- check: Practice mode, does a recording contain the expected chord
- info: Show audio file information
"""

import typer
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, Iterator, List
from rich.console import Console
from rich.table import Table

from .config import PipelineConfig, SENSITIVITY_PRESETS
from .core import ConfigurationError, frequency_to_note_info
from .extraction import EXTRACTORS

app = typer.Typer(
    name="chordsense",
    help="Chord recognition for short guitar recordings",
    rich_markup_mode="markdown",
)
console = Console()


@dataclass
class StageTimings:
    """Wall-clock milliseconds spent in each pipeline stage."""

    stages_ms: Dict[str, float] = field(default_factory=dict)

    @contextmanager
    def measure(self, stage: str) -> Iterator[None]:
        """Time the body of a `with` block as `stage`."""
        started = time.perf_counter()
        try:
            yield
        finally:
            self.stages_ms[stage] = (time.perf_counter() - started) * 1000.0

    @property
    def total_ms(self) -> float:
        return sum(self.stages_ms.values())

    def print_summary(self) -> None:
        console.print("\n[bold]Timing Summary:[/bold]")
        for stage, elapsed in self.stages_ms.items():
            console.print(f"  {stage}: {elapsed:.1f}ms")
        console.print(f"  [bold]Total: {self.total_ms:.1f}ms[/bold]")

    def to_dict(self) -> Dict[str, Any]:
        return {"stages_ms": dict(self.stages_ms), "total_ms": self.total_ms}


def _build_config(
    strategy: Optional[str],
    sensitivity: str,
    config_file: Optional[Path],
) -> PipelineConfig:
    """Config from a JSON file or a preset; --strategy wins over both."""
    try:
        if config_file is not None:
            config = PipelineConfig.from_json(config_file)
        else:
            config = PipelineConfig.for_sensitivity(sensitivity)
        if strategy is not None:
            config.strategy = strategy
        return config.validate()
    except (ConfigurationError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(2)


def _load(
    input_file: Path,
    config: Optional[PipelineConfig] = None,
    offset: float = 0.0,
    duration: Optional[float] = None,
):
    """Load a file into a SampleBuffer, exiting with an error message on failure."""
    from .input import AudioLoader

    loader = AudioLoader() if config is None else AudioLoader(silence_rms=config.extractor.min_rms)
    try:
        return loader.load(str(input_file), offset=offset, duration=duration)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _setup_verbose(verbose: bool) -> None:
    if verbose:
        from .logging_config import setup_logging
        setup_logging("DEBUG")


_STRATEGY_HELP = f"Extraction strategy ({', '.join(sorted(EXTRACTORS))})"
_SENSITIVITY_HELP = f"Sensitivity preset ({', '.join(SENSITIVITY_PRESETS)})"

# Practice mode only accepts a chord ranked this high
_CHECK_TOP_N = 3


@app.command()
def detect(
    input_file: Path = typer.Argument(..., help="Input audio file (WAV, MP3, FLAC, ...)"),
    strategy: Optional[str] = typer.Option(None, "-s", "--strategy", help=_STRATEGY_HELP),
    top: int = typer.Option(3, "-n", "--top", help="Number of chord candidates to show"),
    sensitivity: str = typer.Option("medium", "--sensitivity", help=_SENSITIVITY_HELP),
    config_file: Optional[Path] = typer.Option(None, "-c", "--config", help="JSON config file"),
    offset: float = typer.Option(0.0, "--offset", help="Start analysis this many seconds in"),
    duration: Optional[float] = typer.Option(None, "--duration", help="Only analyse this many seconds"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log pipeline stages"),
    show_timings: bool = typer.Option(False, "--timings", help="Show stage timings"),
):
    """Recognize the chord in a short recording.

    Examples:
        chordsense detect strum.wav
        chordsense detect strum.wav --strategy spectral --top 5
    """
    from .pipeline import ChordRecognizer

    _setup_verbose(verbose)
    config = _build_config(strategy, sensitivity, config_file)
    if top < 1:
        console.print("[red]Error: --top must be at least 1[/red]")
        raise typer.Exit(2)

    timings = StageTimings()
    with timings.measure("load"):
        buffer = _load(input_file, config, offset, duration)
    with timings.measure("analyze"):
        result = ChordRecognizer(config).analyze(buffer, buffer.sample_rate, top_n=top)

    if as_json:
        payload = {"file": str(input_file), "strategy": config.strategy, **result.to_dict()}
        if show_timings:
            payload["timings"] = timings.to_dict()
        console.print_json(data=payload)
        return

    console.print(f"\n[bold blue]Chord Detection: {input_file.name}[/bold blue]")
    console.print(f"   Strategy: {config.strategy}")
    console.print(f"   Notes: {', '.join(result.pitch_classes) or '-'}")

    if result.candidates:
        _show_candidates_table(result.candidates)
        console.print(f"\n[green]Best match: {result.best.chord_name}[/green]")
    else:
        console.print("[yellow]No chord detected[/yellow]")

    if show_timings:
        timings.print_summary()


@app.command("notes")
def notes_command(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    strategy: Optional[str] = typer.Option(None, "-s", "--strategy", help=_STRATEGY_HELP),
    sensitivity: str = typer.Option("medium", "--sensitivity", help=_SENSITIVITY_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log pipeline stages"),
):
    """Show detected frequencies and pitch classes."""
    from .pipeline import ChordRecognizer

    _setup_verbose(verbose)
    config = _build_config(strategy, sensitivity, None)
    buffer = _load(input_file, config)
    result = ChordRecognizer(config).analyze(buffer, buffer.sample_rate)

    if as_json:
        data = result.to_dict()
        console.print_json(data={k: data[k] for k in ("pitch_classes", "peaks", "fundamentals")})
        return

    if not result.peaks:
        console.print("[yellow]No frequencies detected[/yellow]")
        return

    _show_peaks_table(result.peaks, result.fundamentals, config.harmonics)
    console.print(f"\n   Pitch classes: {', '.join(result.pitch_classes) or '-'}")


@app.command()
def identify(
    notes: List[str] = typer.Argument(..., help="Note names, e.g. C E G or Db F Ab"),
    top: int = typer.Option(3, "-n", "--top", help="Number of chord candidates to show"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Name the chord formed by a list of notes.

    Examples:
        chordsense identify C E G
        chordsense identify A C# E G
    """
    from .core import normalize_notes
    from .inference import match_chords

    if top < 1:
        console.print("[red]Error: --top must be at least 1[/red]")
        raise typer.Exit(2)

    candidates = match_chords(notes, top_n=top)

    if as_json:
        console.print_json(data={
            "notes": normalize_notes(notes),
            "candidates": [c.to_dict() for c in candidates],
        })
        return

    if not candidates:
        console.print("[yellow]No chord matches these notes[/yellow]")
        raise typer.Exit(1)

    _show_candidates_table(candidates)


@app.command()
def chord(
    name: str = typer.Argument(..., help="Chord name, e.g. C, Dm7, F#maj7, 'A minor'"),
):
    """Look up a chord's notes and intervals."""
    from .inference import get_chord_template

    template = get_chord_template(name)
    if template is None:
        console.print(f"[red]Error: Unknown chord: {name}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]{template.name}[/bold] ({template.root} {template.quality})")
    console.print(f"  Notes: {' '.join(template.notes)}")
    console.print(f"  Intervals: {' '.join(str(i) for i in template.intervals)}")


@app.command()
def check(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    expected: str = typer.Argument(..., help="Chord that should be heard, e.g. G or 'A minor'"),
    strategy: Optional[str] = typer.Option(None, "-s", "--strategy", help=_STRATEGY_HELP),
    sensitivity: str = typer.Option("medium", "--sensitivity", help=_SENSITIVITY_HELP),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log pipeline stages"),
):
    """Practice mode: is the expected chord among the top candidates?

    Exits with status 0 on a match and 1 otherwise.
    """
    from .inference import get_chord_template
    from .pipeline import ChordRecognizer

    if get_chord_template(expected) is None:
        console.print(f"[red]Error: Unknown chord: {expected}[/red]")
        raise typer.Exit(2)

    _setup_verbose(verbose)
    config = _build_config(strategy, sensitivity, None)
    buffer = _load(input_file, config)
    result = ChordRecognizer(config).analyze(buffer, buffer.sample_rate, top_n=_CHECK_TOP_N)

    heard = ", ".join(result.chord_names) or "nothing"
    if result.contains(expected):
        console.print(f"[green][OK] {expected} detected[/green] (heard: {heard})")
        return

    console.print(f"[red][X] {expected} not detected[/red] (heard: {heard})")
    raise typer.Exit(1)


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Input audio file"),
):
    """Show information about an audio file."""
    buffer = _load(input_file)

    console.print(f"\n[bold]Audio Info:[/bold] {input_file.name}")
    console.print(f"  Duration: {buffer.duration:.2f} seconds")
    console.print(f"  Sample rate: {buffer.sample_rate} Hz")
    console.print(f"  Samples: {len(buffer):,}")
    console.print(f"  RMS: {buffer.rms:.4f}")


def _show_candidates_table(candidates):
    """Display chord candidates in a table."""
    table = Table(title="Chord Candidates")
    table.add_column("Chord", style="cyan")
    table.add_column("Confidence", style="magenta")
    table.add_column("Matched", style="green")
    table.add_column("Missing", style="yellow")

    for candidate in candidates:
        table.add_row(
            candidate.chord_name,
            f"{candidate.confidence:.2f}",
            " ".join(candidate.matched_notes),
            " ".join(candidate.missing_notes) or "-",
        )

    console.print(table)


def _peak_role(peak, fundamentals, harmonics) -> str:
    """Why a peak was or was not kept by the harmonic filter."""
    from .processing import is_harmonic_of

    if any(peak.frequency == f.frequency for f in fundamentals):
        return "fundamental"
    if any(
        is_harmonic_of(peak.frequency, f.frequency, harmonics.max_harmonic_multiple, harmonics.tolerance_cents)
        for f in fundamentals
    ):
        return "harmonic"
    # Over the max_fundamentals cap
    return "dropped"


def _show_peaks_table(peaks, fundamentals, harmonics):
    """Display detected peaks in a table."""
    table = Table(title="Detected Frequencies")
    table.add_column("Frequency (Hz)", style="cyan")
    table.add_column("Note", style="green")
    table.add_column("Amplitude", style="magenta")
    table.add_column("Role", style="yellow")

    for peak in peaks:
        note = frequency_to_note_info(peak.frequency)
        table.add_row(
            f"{peak.frequency:.1f}",
            note.name if note else "?",
            f"{peak.amplitude:.4f}",
            _peak_role(peak, fundamentals, harmonics),
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
