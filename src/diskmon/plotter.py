"""
Generates plots from diskmon sample files.

This module reads a TSV or Parquet series written by diskmon with Polars
and creates an interactive Plotly chart: absolute usage and running peak
on the upper panel, the delta from the baseline on the lower panel.

Usage:
    diskmon-plot samples.tsv
    diskmon-plot samples.parquet --output-dir plots --unit GiB
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import plotly.graph_objects as go
import polars as pl
from plotly.subplots import make_subplots

from .storage import load_samples

logger = logging.getLogger(__name__)

# Divisors for the y axis unit.
UNIT_BYTES = {
    "B": 1,
    "KiB": 1024,
    "MiB": 1024**2,
    "GiB": 1024**3,
}


def _save_plotly_figure(fig: go.Figure, base_filename: str, output_dir: Path, png: bool = False) -> Path:
    """
    Save a figure as interactive HTML and, on request, as PNG.

    Returns:
        Path of the HTML file
    """
    plot_filename_html = output_dir / f"{base_filename}.html"
    fig.write_html(plot_filename_html)
    logger.info(f"Interactive plot saved to: {plot_filename_html}")

    if png:
        plot_filename_png = output_dir / f"{base_filename}.png"
        try:
            fig.write_image(plot_filename_png, width=1200, height=700)
            logger.info(f"Static plot saved to: {plot_filename_png}")
        except Exception as e:
            # Non-critical; the HTML plot is already written.
            logger.warning(
                f"Failed to save static plot to PNG (Kaleido might be missing): {e}. "
                f"To enable PNG export, install Kaleido: `pip install diskmon[export]`"
            )
    return plot_filename_html


def build_usage_figure(df: pl.DataFrame, title: str, unit: str = "MiB") -> go.Figure:
    """
    Create the usage/peak/delta figure for a sample series.

    Args:
        df: Samples as returned by load_samples()
        title: Figure title
        unit: One of UNIT_BYTES

    Returns:
        Plotly figure with three traces
    """
    divisor = UNIT_BYTES[unit]
    scaled = df.select(
        pl.col("elapsed_seconds"),
        (pl.col("usage_bytes") / divisor).alias("usage"),
        (pl.col("peak_bytes") / divisor).alias("peak"),
        (pl.col("delta_bytes") / divisor).alias("delta"),
    )
    elapsed = scaled["elapsed_seconds"].to_list()

    fig = make_subplots(
        rows=2,
        cols=1,
        shared_xaxes=True,
        vertical_spacing=0.08,
        row_heights=[0.65, 0.35],
        subplot_titles=("Disk usage", "Change from baseline"),
    )
    fig.add_trace(
        go.Scatter(x=elapsed, y=scaled["usage"].to_list(), mode="lines+markers", name="Usage"),
        row=1,
        col=1,
    )
    fig.add_trace(
        go.Scatter(
            x=elapsed,
            y=scaled["peak"].to_list(),
            mode="lines",
            name="Peak",
            line={"dash": "dash"},
        ),
        row=1,
        col=1,
    )
    fig.add_trace(
        go.Scatter(
            x=elapsed,
            y=scaled["delta"].to_list(),
            mode="lines",
            name="Delta",
            fill="tozeroy",
        ),
        row=2,
        col=1,
    )

    fig.update_layout(title=title, hovermode="x unified", legend_title_text="Series")
    fig.update_xaxes(title_text="Elapsed (s)", row=2, col=1)
    fig.update_yaxes(title_text=unit, row=1, col=1)
    fig.update_yaxes(title_text=unit, row=2, col=1)
    return fig


def plot_samples_file(
    data_filepath: Path,
    output_dir: Optional[Path] = None,
    unit: str = "MiB",
    png: bool = False,
) -> Optional[Path]:
    """
    Plot one sample file.

    Returns:
        Path of the written HTML file, None if the file holds no samples
    """
    df = load_samples(data_filepath)
    if df.is_empty():
        logger.warning(f"No samples in {data_filepath}. Skipping.")
        return None

    peak = df["peak_bytes"].max()
    duration = df["elapsed_seconds"].max()
    title = (
        f"Disk usage - {data_filepath.stem}<br>"
        f"<sup>{len(df)} samples over {duration:.1f}s, peak {peak / UNIT_BYTES[unit]:.2f} {unit}</sup>"
    )
    fig = build_usage_figure(df, title=title, unit=unit)

    output_dir = output_dir or data_filepath.parent
    output_dir.mkdir(parents=True, exist_ok=True)
    return _save_plotly_figure(fig, f"{data_filepath.stem}_usage", output_dir, png=png)


def main(argv=None) -> None:
    """Command-line interface of the plotter tool."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(
        prog="diskmon-plot",
        description="Generate plots from diskmon sample files (TSV or Parquet).",
    )
    parser.add_argument("files", type=Path, nargs="+", help="Sample files to plot.")
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory to save plots. Defaults to the directory of each input file.",
    )
    parser.add_argument(
        "--unit",
        choices=list(UNIT_BYTES),
        default="MiB",
        help="Unit of the y axes. Default: MiB.",
    )
    parser.add_argument(
        "--png",
        action="store_true",
        help="Also save a static PNG image (requires Kaleido).",
    )
    args = parser.parse_args(argv)

    failures = 0
    for data_filepath in args.files:
        if not data_filepath.is_file():
            logger.error(f"Sample file not found: {data_filepath}")
            failures += 1
            continue
        try:
            plot_samples_file(data_filepath, args.output_dir, unit=args.unit, png=args.png)
        except (OSError, ValueError, pl.exceptions.PolarsError) as e:
            logger.error(f"Failed to plot {data_filepath}: {e}")
            failures += 1

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
