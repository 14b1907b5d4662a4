from __future__ import annotations

import logging
from typing import Optional, Tuple

from progress_bridge.models import OperationDescriptor


DEFAULT_MAX_DEPTH = 256
SEPARATOR = " > "

log = logging.getLogger("progress_bridge.event_processing")


def descriptor_chain(
    descriptor: OperationDescriptor,
    max_depth: int = DEFAULT_MAX_DEPTH,
    logger: Optional[logging.Logger] = None,
) -> list[OperationDescriptor]:
    """
    The descriptor followed by its ancestors, nearest first.
    Stops at the first descriptor already seen or after max_depth entries.
    """
    logger = logger if logger is not None else log
    chain: list[OperationDescriptor] = []
    seen: set[int] = set()
    current: Optional[OperationDescriptor] = descriptor

    while current is not None:
        if id(current) in seen:
            logger.warning("Cyclic descriptor chain at %r, truncating event id", current.display_name)
            break
        if len(chain) >= max_depth:
            logger.warning("Descriptor chain deeper than %d, truncating event id", max_depth)
            break
        seen.add(id(current))
        chain.append(current)
        current = current.parent

    return chain


def _join(operation_id: str, chain: list[OperationDescriptor]) -> str:
    parts = [f"[{operation_id}]"]
    parts.extend(f"[{d.display_name}]" for d in chain)
    return SEPARATOR.join(parts)


def create_event_id(
    descriptor: OperationDescriptor,
    operation_id: str,
    max_depth: int = DEFAULT_MAX_DEPTH,
    logger: Optional[logging.Logger] = None,
) -> str:
    return _join(operation_id, descriptor_chain(descriptor, max_depth, logger))


def create_event_ids(
    descriptor: OperationDescriptor,
    operation_id: str,
    max_depth: int = DEFAULT_MAX_DEPTH,
    logger: Optional[logging.Logger] = None,
) -> Tuple[str, Optional[str]]:
    """Event id and parent event id from a single walk of the chain."""
    chain = descriptor_chain(descriptor, max_depth, logger)
    parent_id = _join(operation_id, chain[1:]) if descriptor.parent is not None else None
    return _join(operation_id, chain), parent_id
