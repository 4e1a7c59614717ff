"""
Command-line interface for pdfeditx.
"""

import sys
import warnings
from pathlib import Path

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from pdfeditx import __version__
from pdfeditx.exceptions import PDFEditXError, ProtectionNotAppliedWarning
from pdfeditx.operations import (
    compress_pdf,
    get_document_info,
    images_to_pdf,
    merge_pdfs,
    pdf_to_images,
    protect_pdf,
    reorder_pdf,
    split_pdf,
    unlock_pdf,
)
from pdfeditx.utils import format_file_size

console = Console()


def _fail(error: Exception) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {error}")
    sys.exit(1)


def _write_result(result, output: str) -> None:
    destination = Path(output)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(result.data)
    console.print(
        f"\n[bold green]✓ Created {destination.name}[/bold green] "
        f"[dim]({result.artifact.kind.value}, {result.artifact.size})[/dim]"
    )
    if result.page_count is not None:
        console.print(f"[dim]Pages: {result.page_count}[/dim]")


def _page_progress() -> Progress:
    return Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    )


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    pdfeditx - merge, split, reorder, compress and convert PDF files.
    """
    pass


@cli.command(name="merge")
@click.argument('inputs', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', default='merged.pdf', show_default=True, type=click.Path(),
              help='Output PDF path')
def merge(inputs, output):
    """
    Merge PDF files in the order given.

    Example:

        pdfeditx merge a.pdf b.pdf -o both.pdf
    """
    try:
        result = merge_pdfs([Path(path).read_bytes() for path in inputs], name=Path(output).name)
        _write_result(result, output)
    except (PDFEditXError, OSError) as e:
        _fail(e)


@cli.command(name="split")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--pages', '-p', required=True, help='Pages to keep, e.g. "1-3,5,8-10"')
@click.option('--output', '-o', default='split.pdf', show_default=True, type=click.Path(),
              help='Output PDF path')
@click.option('--password', default=None, help='Password for encrypted input')
def split(input_pdf, pages, output, password):
    """
    Keep only the selected pages of a PDF.

    Example:

        pdfeditx split report.pdf -p "1-3,5" -o summary.pdf
    """
    try:
        result = split_pdf(Path(input_pdf).read_bytes(), pages, password=password,
                           name=Path(output).name)
        _write_result(result, output)
    except (PDFEditXError, OSError) as e:
        _fail(e)


@cli.command(name="reorder")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--order', required=True,
              help='New page order as comma separated 1-based page numbers, e.g. "3,1,2"')
@click.option('--output', '-o', default='reordered.pdf', show_default=True, type=click.Path(),
              help='Output PDF path')
@click.option('--password', default=None, help='Password for encrypted input')
def reorder(input_pdf, order, output, password):
    """
    Rearrange the pages of a PDF.
    """
    try:
        permutation = [int(token) - 1 for token in order.split(',') if token.strip()]
    except ValueError:
        _fail(click.BadParameter(f"Invalid page order: {order}"))
        return

    try:
        result = reorder_pdf(Path(input_pdf).read_bytes(), permutation, password=password,
                             name=Path(output).name)
        _write_result(result, output)
    except (PDFEditXError, OSError) as e:
        _fail(e)


@cli.command(name="compress")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--quality', '-q', default=0.5, show_default=True,
              type=click.FloatRange(0.0, 1.0), help='Quality between 0 and 1')
@click.option('--output', '-o', default='compressed.pdf', show_default=True, type=click.Path(),
              help='Output PDF path')
@click.option('--password', default=None, help='Password for encrypted input')
def compress(input_pdf, quality, output, password):
    """
    Compress a PDF. Below quality 0.9 pages are rasterized.
    """
    try:
        source = Path(input_pdf).read_bytes()
        progress = _page_progress()
        with progress:
            task = progress.add_task("Rendering pages", total=None)

            def update_progress(current, total):
                progress.update(task, completed=current, total=total)

            result = compress_pdf(source, quality, password=password, name=Path(output).name,
                                  progress_callback=update_progress)
        _write_result(result, output)
        console.print(
            f"[dim]{format_file_size(len(source))} → {result.artifact.size}[/dim]"
        )
    except (PDFEditXError, OSError) as e:
        _fail(e)


@cli.command(name="images-to-pdf")
@click.argument('images', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--orientation', type=click.Choice(['portrait', 'landscape']), default='portrait',
              show_default=True)
@click.option('--format', 'page_format', type=click.Choice(['a4', 'fit']), default='a4',
              show_default=True, help='Fixed A4 pages or pages sized to each image')
@click.option('--keep-aspect', is_flag=True, help='Letterbox images instead of stretching them')
@click.option('--output', '-o', default='converted_images.pdf', show_default=True,
              type=click.Path(), help='Output PDF path')
def images_to_pdf_command(images, orientation, page_format, keep_aspect, output):
    """
    Convert images into a PDF, one page per image.
    """
    try:
        result = images_to_pdf(
            [Path(path).read_bytes() for path in images],
            orientation=orientation,
            page_format=page_format,
            preserve_aspect=keep_aspect,
            name=Path(output).name,
        )
        _write_result(result, output)
    except (PDFEditXError, OSError) as e:
        _fail(e)


@cli.command(name="pdf-to-images")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', default='extracted_pages.zip', show_default=True,
              type=click.Path(), help='Output ZIP path')
@click.option('--password', default=None, help='Password for encrypted input')
def pdf_to_images_command(input_pdf, output, password):
    """
    Export every page as a JPEG inside a ZIP archive.
    """
    try:
        progress = _page_progress()
        with progress:
            task = progress.add_task("Exporting pages", total=None)

            def update_progress(current, total):
                progress.update(task, completed=current, total=total)

            result = pdf_to_images(Path(input_pdf).read_bytes(), password=password,
                                   name=Path(output).name, progress_callback=update_progress)
        _write_result(result, output)
    except (PDFEditXError, OSError) as e:
        _fail(e)


@cli.command(name="unlock")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--password', prompt=True, hide_input=True, help='Document password')
@click.option('--output', '-o', default='unlocked.pdf', show_default=True, type=click.Path(),
              help='Output PDF path')
def unlock(input_pdf, password, output):
    """
    Remove the password from a protected PDF.
    """
    try:
        result = unlock_pdf(Path(input_pdf).read_bytes(), password, name=Path(output).name)
        _write_result(result, output)
    except (PDFEditXError, OSError) as e:
        _fail(e)


@cli.command(name="protect")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--password', prompt=True, hide_input=True, help='Password to apply')
@click.option('--output', '-o', default='protected.pdf', show_default=True, type=click.Path(),
              help='Output PDF path')
def protect(input_pdf, password, output):
    """
    Request password protection (not supported: the file is copied unchanged).
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ProtectionNotAppliedWarning)
            result = protect_pdf(Path(input_pdf).read_bytes(), password, name=Path(output).name)
        _write_result(result, output)
        for notice in result.warnings:
            console.print(f"[bold yellow]! Warning:[/bold yellow] {notice}")
    except (PDFEditXError, OSError) as e:
        _fail(e)


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--password', default=None, help='Password for encrypted input')
def show_info(input_pdf, password):
    """
    Display information about a PDF file.
    """
    try:
        info = get_document_info(Path(input_pdf).read_bytes(), password=password)
    except (PDFEditXError, OSError) as e:
        _fail(e)
        return

    info_table = Table(title="PDF Information", show_header=False)
    info_table.add_column("Property", style="cyan")
    info_table.add_column("Value", style="green")

    info_table.add_row("File", Path(input_pdf).name)
    info_table.add_row("Pages", str(info.num_pages))
    info_table.add_row("Size", format_file_size(info.file_size))
    if info.title:
        info_table.add_row("Title", info.title)
    if info.author:
        info_table.add_row("Author", info.author)
    info_table.add_row("Encrypted", "Yes" if info.was_encrypted else "No")
    console.print(info_table)

    pages_table = Table(title="Pages")
    pages_table.add_column("#", style="cyan", justify="right")
    pages_table.add_column("Width (pt)", justify="right")
    pages_table.add_column("Height (pt)", justify="right")
    pages_table.add_column("Rotation", justify="right")
    for number, geometry in enumerate(info.pages, start=1):
        pages_table.add_row(
            str(number),
            f"{geometry.width:.1f}",
            f"{geometry.height:.1f}",
            str(geometry.rotation),
        )
    console.print(pages_table)


if __name__ == '__main__':
    cli()
