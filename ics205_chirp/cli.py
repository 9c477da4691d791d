"""CLI interface for ICS-205 to CHIRP conversion"""
import dataclasses
import logging
import sys
import time
import traceback
from pathlib import Path
from typing import Optional

import click

from .config import ConverterConfig
from .converter import ChannelConverter
from .errors import ConversionError
from .text_extractor import TextExtractor


def convert_pdf_file(converter: ChannelConverter,
                     pdf_path: Path,
                     output_path: Optional[Path] = None,
                     output_dir: Optional[Path] = None) -> bool:
    """Convert a single PDF file and write its CSV; returns success"""
    try:
        pdf_bytes = pdf_path.read_bytes()

        click.echo(f"Processing: {pdf_path.name}")

        start_ts = time.perf_counter()
        result = converter.convert(pdf_bytes, pdf_path.name)
        elapsed_s = time.perf_counter() - start_ts

        if output_path is None:
            output_path = (output_dir or pdf_path.parent) / result.filename
        output_path.write_text(result.to_csv(), encoding='utf-8')

        click.echo(f"  {result.channel_count} channel(s) saved to: {output_path}")
        click.echo(f"  Time: {elapsed_s:.2f}s | Tier: {result.tier}")
        return True

    except ConversionError as e:
        click.echo(f"  Error processing {pdf_path.name}: {e}", err=True)
        return False
    except OSError as e:
        click.echo(f"  Error reading/writing {pdf_path.name}: {e}", err=True)
        if click.get_current_context().params.get('verbose'):
            traceback.print_exc()
        return False


def print_text(pdf_path: Path) -> bool:
    """Print the extracted text layer of a PDF (no conversion)"""
    try:
        extracted = TextExtractor().extract(pdf_path.read_bytes())
    except ConversionError as e:
        click.echo(f"Error extracting text from {pdf_path.name}: {e}", err=True)
        return False
    click.echo(f"--- {pdf_path.name}: {extracted.page_count} page(s), "
               f"{extracted.char_count} characters ---")
    click.echo(extracted.text)
    return True


@click.command()
@click.argument('input_path', type=click.Path(exists=True, path_type=Path))
@click.argument('output_path', required=False,
                type=click.Path(dir_okay=False, path_type=Path))
@click.option('--output-dir', '-o',
              type=click.Path(file_okay=False, path_type=Path),
              help='Directory to save CSV files (folder input)')
@click.option('--no-document-ai', is_flag=True,
              help='Skip direct PDF upload to the document-capable model')
@click.option('--text-only', '-t', is_flag=True,
              help='Print extracted PDF text instead of converting')
@click.option('--verbose', '-v', is_flag=True,
              help='Verbose output')
def main(input_path: Path, output_path: Path, output_dir: Path,
         no_document_ai: bool, text_only: bool, verbose: bool):
    """
    Convert ICS-205 Radio Communications Plan PDFs to CHIRP CSV files.

    INPUT_PATH: A PDF file, or a folder containing PDF files

    OUTPUT_PATH: Optional CSV path (single-file input only)

    Examples:

    \b
    # Single plan, CSV written next to it as plan-channels.csv
    ics205-chirp plan.pdf

    \b
    # Every PDF in a folder
    ics205-chirp plans/ --output-dir csv
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if input_path.is_dir():
        pdf_files = sorted(p for p in input_path.iterdir() if p.suffix.lower() == '.pdf')
        if not pdf_files:
            click.echo(f"No PDF files found in {input_path}", err=True)
            sys.exit(1)
        if output_path:
            click.echo("Error: OUTPUT_PATH only applies to a single PDF; use --output-dir", err=True)
            sys.exit(2)
    else:
        pdf_files = [input_path]

    if text_only:
        ok = [print_text(pdf_file) for pdf_file in pdf_files]
        sys.exit(0 if all(ok) else 1)

    # Initialize converter
    try:
        config = ConverterConfig.from_env()
        if no_document_ai:
            config = dataclasses.replace(config, document_ai=False)
        converter = ChannelConverter.from_config(config)
    except ConversionError as e:
        click.echo(f"Error initializing converter: {e}", err=True)
        sys.exit(1)

    if output_dir:
        output_dir.mkdir(parents=True, exist_ok=True)

    if len(pdf_files) > 1:
        click.echo(f"Found {len(pdf_files)} PDF file(s)")

    succeeded = 0
    for pdf_file in pdf_files:
        if convert_pdf_file(converter, pdf_file, output_path, output_dir):
            succeeded += 1

    # Summary
    click.echo(f"\nConverted {succeeded} of {len(pdf_files)} PDF(s)")
    if succeeded != len(pdf_files):
        sys.exit(1)


if __name__ == '__main__':
    main()
