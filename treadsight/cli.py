"""
cli.py
------
Command-line interface for headless tire analysis.

Commands:
    treadsight analyze    Analyse a tire photo and print the health report
    treadsight timeline   Sweep the time-travel engine and print / write states
    treadsight render     Render one aged frame of a tire photo
    treadsight sequence   Render an evenly spaced series of aged frames
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click
from tqdm import tqdm

from treadsight.core.config import AppConfig, load_config
from treadsight.core.exceptions import TreadSightError
from treadsight.core.models import AnalysisResult, DeteriorationOptions, UsageProfile, WeatherMode
from treadsight.export.csv_writer import TimelineCsvWriter
from treadsight.export.report import read_report_json, write_report_json
from treadsight.ingestion.image_file import load_image, save_image
from treadsight.narrative.fallback import cta_for_risk, generate_fallback_explanation
from treadsight.processing.pipeline import AnalysisPipeline

_WEATHER_CHOICES = click.Choice([m.value for m in WeatherMode])


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def _load(config_path: Optional[str], log_level: Optional[str]) -> AppConfig:
    try:
        cfg = load_config(config_path)
    except TreadSightError as exc:
        raise click.ClickException(str(exc)) from exc
    _setup_logging(log_level or cfg.logging.log_level)
    return cfg


def _analyse(pipeline: AnalysisPipeline, cfg: AppConfig, image: str, miles: Optional[int], zip_code: Optional[str]) -> AnalysisResult:
    try:
        buffer = load_image(image, cfg.ingestion.max_dimension)
        usage = UsageProfile(
            miles_per_year=cfg.ingestion.default_miles_per_year if miles is None else miles,
            zip=zip_code,
        )
        return pipeline.run(buffer, usage)
    except TreadSightError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
def main() -> None:
    """TreadSight tire tread analysis -- CLI."""


# ---------------------------------------------------------------------------
# treadsight analyze
# ---------------------------------------------------------------------------

@main.command("analyze")
@click.option("--image", required=True, type=click.Path(exists=True), help="Tire photo (JPEG, PNG, ...).")
@click.option("--miles", default=None, type=click.IntRange(min=0), help="Miles driven per year.")
@click.option("--zip", "zip_code", default=None, help="5-digit US ZIP code for the climate modifier.")
@click.option("--weather", default="dry", show_default=True, type=_WEATHER_CHOICES, help="Weather context.")
@click.option("--report", default=None, type=click.Path(), help="Write a JSON report to this path.")
@click.option("--config", "config_path", default=None, type=click.Path(), help="YAML config (default: config/default.yaml).")
@click.option("--log-level", default=None, help="Logging verbosity (default: from config).")
def analyze_cmd(image, miles, zip_code, weather, report, config_path, log_level):
    """Analyse a tire photo: quality, tread bucket, health score and wear dates."""
    cfg = _load(config_path, log_level)
    pipeline = AnalysisPipeline(cfg)
    result = _analyse(pipeline, cfg, image, miles, zip_code)

    est = result.tread_estimate
    q = result.image_quality
    wp = result.wear_prediction
    hs = result.health_score
    weather_risk = pipeline.weather.evaluate(wp.current_depth, hs.risk_level, weather)
    explanation = generate_fallback_explanation(result, weather)
    cta = cta_for_risk(weather_risk.adjusted_risk_level)

    click.echo("\n" + "=" * 60)
    click.echo(f" {Path(image).name}")
    click.echo("=" * 60)
    click.echo(f"  Image quality    : {q.overall:.2f} ({'ok' if q.acceptable else 'poor'})")
    click.echo(f"  Tread bucket     : {est.bucket.value} ({est.depth_range.min:g}-{est.depth_range.max:g}/32\")")
    click.echo(f"  Confidence       : {est.confidence:.0%}")
    click.echo(f"  Health score     : {hs.score}/100 ({hs.risk_level.value})")
    click.echo(f"  Climate          : {result.climate.value}")
    click.echo(f"  Wear rate        : {wp.wear_rate_per_1000_miles:.3f}/32\" per 1000 mi")
    click.echo(f"  Wet traction     : {wp.wet_traction_drop_date.isoformat()}")
    click.echo(f"  Legal minimum    : {wp.legal_minimum_date.isoformat()}")
    click.echo(f"  Remaining        : ~{wp.remaining_months} months (+/-{wp.confidence_band:.0%})")
    click.echo(f"  Risk ({weather:<4})      : {weather_risk.adjusted_risk_level.value}")
    click.echo(f"    {weather_risk.description}")
    click.echo("")
    click.echo(f"  {explanation.narrative}")
    for insight in explanation.key_insights:
        click.echo(f"   * {insight}")
    click.echo(f"  Next step: {cta.label} - {cta.description}")
    click.echo(f"  {explanation.disclaimer}")

    if report:
        out = write_report_json(result, report, weather_mode=weather, explanation=explanation)
        click.echo(f"\n  Report JSON: {out}")
    click.echo("")


# ---------------------------------------------------------------------------
# treadsight timeline
# ---------------------------------------------------------------------------

@main.command("timeline")
@click.option("--image", default=None, type=click.Path(exists=True), help="Tire photo to analyse.")
@click.option("--from-report", "from_report", default=None, type=click.Path(exists=True),
              help="Reuse an analysis saved with 'analyze --report' instead of a photo.")
@click.option("--miles", default=None, type=click.IntRange(min=0), help="Miles driven per year.")
@click.option("--zip", "zip_code", default=None, help="5-digit US ZIP code.")
@click.option("--steps", default=11, show_default=True, type=click.IntRange(min=1), help="Number of evenly spaced t values.")
@click.option("--weather", default="dry", show_default=True, type=_WEATHER_CHOICES, help="Weather mode.")
@click.option("--skip-rotations", is_flag=True, help="Apply the skipped-rotations wear multiplier.")
@click.option("--aggressive", is_flag=True, help="Apply the aggressive-driving wear multiplier.")
@click.option("--csv", "csv_out", default=None, type=click.Path(), help="Also write the states to CSV.")
@click.option("--config", "config_path", default=None, type=click.Path(), help="YAML config.")
@click.option("--log-level", default=None, help="Logging verbosity.")
def timeline_cmd(image, from_report, miles, zip_code, steps, weather, skip_rotations, aggressive,
                 csv_out, config_path, log_level):
    """Project depth, score and risk from today to end of life."""
    if bool(image) == bool(from_report):
        raise click.UsageError("Pass exactly one of --image or --from-report.")

    cfg = _load(config_path, log_level)
    pipeline = AnalysisPipeline(cfg)
    if image:
        analysis = _analyse(pipeline, cfg, image, miles, zip_code)
    else:
        try:
            analysis = read_report_json(from_report)
        except (TreadSightError, KeyError, ValueError) as exc:
            raise click.ClickException(f"Unreadable report {from_report}: {exc}") from exc

    states = pipeline.time_travel(analysis).sweep(steps, weather, skip_rotations, aggressive)

    click.echo(f"\n{'t':>6} {'Date':<12} {'Depth':>7} {'Score':>6}  Risk")
    click.echo("-" * 48)
    for s in states:
        click.echo(f"{s.t:>6.2f} {s.current_date.isoformat():<12} {s.current_depth:>6.2f}\" {s.current_score:>6}  {s.current_risk.value}")
    click.echo(f"\n  Span: {states[-1].total_months} months ({weather})")

    if csv_out:
        with TimelineCsvWriter(csv_out) as writer:
            writer.write_all(states)
        click.echo(f"  CSV : {csv_out}")
    click.echo("")


# ---------------------------------------------------------------------------
# treadsight render
# ---------------------------------------------------------------------------

@main.command("render")
@click.option("--image", required=True, type=click.Path(exists=True), help="Tire photo.")
@click.option("--t", "t", required=True, type=click.FloatRange(0.0, 1.0), help="Wear parameter (0 = today, 1 = end of life).")
@click.option("--uneven-wear", is_flag=True, help="Concentrate wear on the outer shoulder.")
@click.option("--width", default=0, show_default=True, help="Output width (0 = source width).")
@click.option("--height", default=0, show_default=True, help="Output height (0 = source height).")
@click.option("--out", required=True, type=click.Path(), help="Output image path (.png).")
@click.option("--config", "config_path", default=None, type=click.Path(), help="YAML config.")
@click.option("--log-level", default=None, help="Logging verbosity.")
def render_cmd(image, t, uneven_wear, width, height, out, config_path, log_level):
    """Render the photo aged to wear parameter T."""
    cfg = _load(config_path, log_level)
    pipeline = AnalysisPipeline(cfg)
    try:
        source = load_image(image, cfg.ingestion.max_dimension)
        aged = pipeline.deterioration.render(
            source,
            DeteriorationOptions(t=t, uneven_wear=uneven_wear or cfg.deterioration.uneven_wear,
                                 width=width, height=height),
        )
        save_image(aged, out)
    except TreadSightError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Rendered t={t:.2f}: {out}")


# ---------------------------------------------------------------------------
# treadsight sequence
# ---------------------------------------------------------------------------

@main.command("sequence")
@click.option("--image", required=True, type=click.Path(exists=True), help="Tire photo.")
@click.option("--frames", default=10, show_default=True, type=click.IntRange(min=1), help="Number of frames.")
@click.option("--out-dir", required=True, type=click.Path(), help="Directory for frame_NNN.png files.")
@click.option("--uneven-wear", is_flag=True, help="Concentrate wear on the outer shoulder.")
@click.option("--config", "config_path", default=None, type=click.Path(), help="YAML config.")
@click.option("--log-level", default=None, help="Logging verbosity.")
def sequence_cmd(image, frames, out_dir, uneven_wear, config_path, log_level):
    """Render FRAMES evenly spaced aged frames from t=0 to t=1."""
    cfg = _load(config_path, log_level)
    pipeline = AnalysisPipeline(cfg)
    out_dir_path = Path(out_dir)
    out_dir_path.mkdir(parents=True, exist_ok=True)

    try:
        source = load_image(image, cfg.ingestion.max_dimension)
        with tqdm(total=frames, unit="frame", dynamic_ncols=True) as pbar:
            for i, (t, aged) in enumerate(
                pipeline.deterioration.render_sequence(source, frames, uneven_wear=uneven_wear or None)
            ):
                save_image(aged, out_dir_path / f"frame_{i:03d}.png")
                pbar.set_postfix({"t": f"{t:.2f}"})
                pbar.update(1)
    except TreadSightError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"\n{frames} frames written to {out_dir_path}")


if __name__ == "__main__":
    main()
