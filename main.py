"""FluentForm annotation runner."""

import os
from dataclasses import asdict
from typing import Any

import orjson
import typer
from loguru import logger

from fluentform_pyutils.errors import FluentFormError
from src.transcription_annotation.alignment.recognition_payload import load_assessment_file
from src.transcription_annotation.core.processor import analyze_assessment
from src.transcription_annotation.exceptions import AnnotationException
from src.transcription_annotation.guides.articulation import ArticulationState
from src.transcription_annotation.guides.phoneme_guide import phoneme_info
from utils.config import build_feedback_client, load_config
from utils.logging import setup_logging

app: typer.Typer = typer.Typer(
    help="Annotate pronunciation assessments for the FluentForm display", no_args_is_help=True
)


def _echo_json(data: Any) -> None:
    typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())


@app.command()
def annotate(
    payload_path: str = typer.Argument(..., help="Path to a saved assessment JSON payload"),
    text: str = typer.Option(
        None,
        "--text",
        help="Text to annotate instead of the recognized transcription",
        show_default=False,
    ),
    config_path: str = typer.Option(
        None,
        "--config",
        help="Path to configuration YAML file",
        show_default=False,
    ),
    feedback: bool = typer.Option(
        False,
        "--feedback",
        help="Ask the LLM feedback service for coaching text",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output logs in JSON format instead of human-readable format",
    ),
) -> None:
    """Annotate a saved assessment and print the report as JSON."""
    if json_logs:
        os.environ["LOG_JSON"] = "true"

    setup_logging(service="cli")

    try:
        config = load_config(config_path=config_path)
        if feedback:
            config.feedback.enabled = True

        result = load_assessment_file(payload_path)
        client = build_feedback_client(config=config.feedback)
        try:
            report = analyze_assessment(
                result,
                text=text,
                feedback=client,
                placeholder=config.annotation.placeholder,
            )
        finally:
            if client is not None:
                client.close()

    except (AnnotationException, FluentFormError, FileNotFoundError) as e:
        typer.echo(f"Annotation failed: {e}", err=True)
        logger.error(f"Annotation failed: {e}")
        raise typer.Exit(1) from e

    _echo_json(report.model_dump(mode="json"))


@app.command()
def phoneme(
    symbol: str = typer.Argument(..., help="Phoneme symbol, e.g. r, th or sh"),
) -> None:
    """Print the pronunciation guide and mouth pose for a phoneme."""
    setup_logging(service="cli")

    info = phoneme_info(symbol)
    state = ArticulationState()
    pose = state.show(symbol)

    _echo_json(
        {
            "symbol": symbol,
            "label": state.label,
            "pronunciation": info.pronunciation,
            "examples": list(info.examples),
            "tips": info.tips,
            "pose": asdict(pose),
        }
    )


if __name__ == "__main__":
    app()
