"""chordbox CLI entry point."""

import re
import sys

import click

from chordbox import __version__
from chordbox.chord_exporter import ChordDiagram, ChordImageExporter
from chordbox.chord_models import ChordRequest
from chordbox.chord_renderer import finger_label
from chordbox.notation_parser import MAX_SIZE, MIN_SIZE
from chordbox.request_mapping import DEFAULT_POSITION, DEFAULT_SIZE, map_url
from chordbox.typeface import DEFAULT_FONT, Typeface


def _name_to_filename(name: str) -> str:
    """Convert a chord name to a safe PNG filename.

    Strips characters that are invalid in filenames, collapses whitespace to
    underscores, and appends the .png extension.
    """
    sanitized = re.sub(r"[^\w\s#-]", "", name).replace("#", "sharp")
    sanitized = re.sub(r"\s+", "_", sanitized.strip())
    return f"{sanitized or 'chord'}.png"


def _echo_diagram(diagram: ChordDiagram) -> None:
    model, layout = diagram.model, diagram.layout
    click.echo(f"  Base fret : {model.base_fret}")
    for index, notes in enumerate(model.strings, start=1):
        frets = "/".join("x" if note.fret < 0 else str(note.fret) for note in notes)
        click.echo(f"  String {index}  : fret {frets:<6} finger {finger_label(notes)}")
    for bar in diagram.bars:
        click.echo(
            f"  Barre     : finger {bar.finger} at fret {bar.fret_position}, "
            f"strings {bar.starting_string + 1}-{bar.starting_string + bar.length + 1}"
        )
    click.echo(f"  Image     : {layout.image_width}x{layout.image_height} px")
    click.echo(f"  Box       : {layout.box_width:g}x{layout.box_height:g} px "
               f"at ({layout.x_start:g}, {layout.y_start:g})")


def _write(request: ChordRequest, output: str, font: str, verbose: bool) -> None:
    """Render ``request`` to ``output``, reporting progress the same way for every command."""
    exporter = ChordImageExporter(Typeface(font))

    click.echo("[1/2] Parsing chord notation...")
    diagram = exporter.build(request)
    if diagram.model.parse_error:
        click.echo(
            "  WARNING: Could not parse the positions or fingers; writing the error image.",
            err=True,
        )
    elif verbose:
        _echo_diagram(diagram)

    click.echo(f"[2/2] Writing PNG file → '{output}'...")
    try:
        exporter.export(request, output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write PNG file — {exc}", err=True)
        sys.exit(1)

    click.echo()
    click.echo(f"Done!  Wrote '{output}'.")


_font_option = click.option(
    "--font",
    default=DEFAULT_FONT,
    show_default=True,
    metavar="PATH",
    help="TrueType font for the chord name and labels. Falls back to Pillow's default face.",
)
_verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Print the decoded strings, barres and image geometry.",
)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="chordbox")
def main() -> None:
    """chordbox — guitar chord diagram image generator."""


# ── render subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("name", default="")
@click.option(
    "--position",
    "-p",
    default=DEFAULT_POSITION,
    show_default=True,
    help=(
        "Fret per string, low E first: six characters (x = muted, 0 = open), "
        "or six dash-separated groups for frets of 10 and above, "
        "with '/' between simultaneous notes."
    ),
)
@click.option(
    "--fingers",
    "-f",
    default=None,
    help="Finger per string: six of T,1,2,3,4,- or six '+'-separated groups. Omit for no fingers.",
)
@click.option(
    "--size",
    "-s",
    default=DEFAULT_SIZE,
    show_default=True,
    help=f"Image size ({MIN_SIZE}–{MAX_SIZE}).",
)
@click.option(
    "--full-barre",
    is_flag=True,
    default=False,
    help="Stretch the first barre across every string up to the high e.",
)
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination PNG file path. Defaults to <name>.png.",
)
@_font_option
@_verbose_option
def render(
    name: str,
    position: str,
    fingers: str | None,
    size: str,
    full_barre: bool,
    output: str | None,
    font: str,
    verbose: bool,
) -> None:
    """
    Render one chord diagram to a PNG file.

    NAME is the chord name; '_' switches between normal text and superscript,
    e.g. C_7 or F_#_m.

    \b
    Examples:
      chordbox render D -p xx0232 -f ---132
      chordbox render F -p 133211 -f 134211 --full-barre -s 3
      chordbox render E_7 -p 12-14-12-13-12-12 -o e7.png
    """
    resolved_output = output if output is not None else _name_to_filename(name)

    click.echo(f"chordbox v{__version__}")
    click.echo(f"  Name     : {name}")
    click.echo(f"  Position : {position}  |  Fingers: {fingers or '(none)'}  |  Size: {size}")
    click.echo()

    request = ChordRequest(
        name=name,
        position=position,
        fingers=fingers,
        size=size,
        draw_full_barre=full_barre,
    )
    _write(request, resolved_output, font, verbose)


# ── url subcommand ─────────────────────────────────────────────────────────────

@main.command()
@click.argument("url")
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination PNG file path. Defaults to <name>.png.",
)
@_font_option
@_verbose_option
def url(url: str, output: str | None, font: str, verbose: bool) -> None:
    """
    Render the chord diagram addressed by a chord image URL.

    URL uses the query names pos/p, fingers/f, size/s and full_barre/b
    (wrap it in quotes, it contains &).

    \b
    Examples:
      chordbox url "D.png?p=xx0232&f=---132"
      chordbox url "/C_7.png?p=x32310&f=-32-1-&s=3" -o c7.png
    """
    request = map_url(url)
    if request is None:
        click.echo(f"  ERROR: '{url}' is not a chord image URL (expected <name>.png).", err=True)
        sys.exit(1)

    resolved_output = output if output is not None else _name_to_filename(request.name or "")

    click.echo(f"chordbox v{__version__}")
    click.echo(f"  URL    : {url}")
    click.echo()
    _write(request, resolved_output, font, verbose)


# ── inspect subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.option("--position", "-p", default=DEFAULT_POSITION, show_default=True)
@click.option("--fingers", "-f", default=None)
@click.option("--size", "-s", default=DEFAULT_SIZE, show_default=True)
@click.option("--full-barre", is_flag=True, default=False)
@click.option("--name", default="", help="Chord name, used for the image width.")
@_font_option
def inspect(
    position: str,
    fingers: str | None,
    size: str,
    full_barre: bool,
    name: str,
    font: str,
) -> None:
    """Print how a chord is decoded and laid out without writing an image."""
    request = ChordRequest(
        name=name,
        position=position,
        fingers=fingers,
        size=size,
        draw_full_barre=full_barre,
    )
    diagram = ChordImageExporter(Typeface(font)).build(request)
    if diagram.model.parse_error:
        click.echo(f"  ERROR: Invalid notation (position '{position}', fingers '{fingers or ''}').", err=True)
        sys.exit(1)
    _echo_diagram(diagram)
