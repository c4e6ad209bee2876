"""Choose between the resolved file, the SPA fallback page, 404 and 500."""
from __future__ import annotations

import logging

from .models import RangeSpec, ResolutionResult, ServeConfig
from .resolver import resolve
from .response import HttpResponse, write_found, write_not_found, write_server_error

logger = logging.getLogger(__name__)


def _write_file(response: HttpResponse, config: ServeConfig, result: ResolutionResult, byte_range: RangeSpec | None) -> None:
    assert result.content is not None
    write_found(
        response,
        result.file_path,
        result.content,
        byte_range,
        default_content_type=config.default_content_type,
        strict_ranges=config.strict_ranges,
    )


async def handle_resolution(
    response: HttpResponse,
    config: ServeConfig,
    result: ResolutionResult,
    byte_range: RangeSpec | None,
) -> None:
    """Finish ``response`` for the outcome of the first resolution attempt.

    Only a not-found miss is eligible for the fallback page. Fallback
    responses ignore the request's range.
    """
    if result.found:
        _write_file(response, config, result, byte_range)
        return

    if not result.not_found:
        assert result.error is not None
        write_server_error(response, result.file_path, result.error)
        return

    fallback_path = config.fallback_path
    if fallback_path is None:
        write_not_found(response, result.file_path)
        return

    fallback = await resolve(config.content_base, fallback_path)
    if fallback.found:
        logger.debug("serving fallback %s for %s", fallback.file_path, result.file_path)
        _write_file(response, config, fallback, None)
    else:
        write_not_found(response, fallback.file_path)


__all__ = ["handle_resolution"]
