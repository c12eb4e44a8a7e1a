# Output rendering and console reporting
import json
from dataclasses import asdict

from loguru import logger

from bitflip.records import FlipEvent, Output
from bitflip.result import RenderResult


def event_to_json(event: FlipEvent) -> str:
    return json.dumps(asdict(event), indent=4)


def console_observer(event: FlipEvent, rate: float) -> None:
    """Pretty print event. Pass as FaultInjector observer."""
    logger.info(f"Error rate {rate}, iteration {event.iteration}:\n{event_to_json(event)}")


def render(output: Output) -> RenderResult:
    """Serialize all buckets and their events as tab indented JSON.

    Args:
        output (Output): Injector output.

    Returns:
        RenderResult: Rendered text, or error message if serialization failed.
    """
    try:
        text: str = json.dumps(asdict(output), indent="\t")
    except (TypeError, ValueError) as e:
        logger.error(f"Output serialization failed: {e}")
        return RenderResult(ok=False, error=str(e))

    return RenderResult(ok=True, text=text)
