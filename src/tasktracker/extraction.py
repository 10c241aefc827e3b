"""Extraction strategies and their composition.

The model-backed strategy is tried first; any failure or timeout drops to
the deterministic heuristic scanner. Callers only ever see a complete list.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

from .core.extraction import (
    ExtractionError,
    ExtractionUnavailable,
    build_extraction_prompt,
    extract_with_fallback,
    parse_model_response,
)
from .core.tasks import CandidateTask
from .ports.extraction_strategy import ExtractionStrategy
from .ports.llm_service import LLMService

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class ModelExtractionStrategy:
    """Ask a generative text service for a JSON task list."""

    def __init__(self, llm: LLMService):
        self.llm = llm

    def extract(self, transcript: str) -> list[CandidateTask]:
        prompt = build_extraction_prompt(transcript)
        try:
            response = self.llm.generate(prompt)
        except Exception as e:
            raise ExtractionUnavailable(str(e)) from e
        return parse_model_response(response)


class HeuristicExtractionStrategy:
    """Keyword scanner. Never fails."""

    def extract(self, transcript: str) -> list[CandidateTask]:
        return extract_with_fallback(transcript)


async def extract_tasks(
    transcript: str,
    primary: ExtractionStrategy | None = None,
    fallback: ExtractionStrategy | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[CandidateTask]:
    """
    Extract candidate tasks from a transcript.

    The primary strategy runs in its own worker thread so the event loop
    stays free. On timeout the thread is abandoned, not joined, so a stuck
    model call never delays the fallback. Nothing is persisted here.
    """
    fallback = fallback or HeuristicExtractionStrategy()

    if primary is not None:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="extraction")
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(loop.run_in_executor(executor, primary.extract, transcript), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Model extraction timed out after {timeout}s, using fallback")
        except ExtractionError as e:
            logger.warning(f"Model extraction failed ({type(e).__name__}: {e}), using fallback")
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    return fallback.extract(transcript)


def extract_tasks_sync(
    transcript: str,
    primary: ExtractionStrategy | None = None,
    fallback: ExtractionStrategy | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[CandidateTask]:
    """Blocking wrapper around extract_tasks for the CLI."""
    return asyncio.run(extract_tasks(transcript, primary, fallback, timeout))
