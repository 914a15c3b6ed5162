"""Status blocks for swaybar.

This package contains the block interface and the concrete blocks, plus the
dispatch table that turns ``[[block]]`` configuration entries into block
instances.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Type

from pydantic import ValidationError

from ..config import Config
from ..errors import ConfigError, ErrorCode
from ..scheduler import SchedulerHandle
from .base import Block, ConfigBlock, ProbeBlock
from .firewall import Firewall
from .killswitch import Killswitch

logger = logging.getLogger(__name__)

BLOCKS: Dict[str, Type[ConfigBlock]] = {
    Firewall.name: Firewall,
    Killswitch.name: Killswitch,
}


def create_block(
    name: str,
    block_config: Mapping[str, Any],
    config: Config,
    update_handle: SchedulerHandle,
) -> ConfigBlock:
    """
    Validate a configuration fragment and build the named block.

    Args:
        name: Block name from the ``block`` key
        block_config: Remaining keys of the fragment
        config: Shared bar context
        update_handle: Channel for proactive update requests

    Returns:
        New block instance

    Raises:
        ConfigError: If the block name is unknown or the fragment is invalid
    """
    block_cls = BLOCKS.get(name)
    if block_cls is None:
        raise ConfigError(
            code=ErrorCode.UNKNOWN_BLOCK,
            message=f"Unknown block: {name}",
            suggestion=f"Available blocks: {', '.join(sorted(BLOCKS))}",
            context={"block": name}
        )

    try:
        validated = block_cls.config_class.model_validate(dict(block_config))
    except ValidationError as e:
        raise ConfigError(
            code=ErrorCode.INVALID_BLOCK_CONFIG,
            message=f"Invalid configuration for block {name}: {e.error_count()} error(s)",
            suggestion="Only 'interval' (seconds or duration such as \"30s\") is recognized",
            context={"block": name, "errors": e.errors(include_url=False)}
        )

    return block_cls.new(validated, config, update_handle)


def build_blocks(
    entries: Iterable[Tuple[str, Mapping[str, Any]]],
    config: Config,
    update_handle: SchedulerHandle,
) -> List[ConfigBlock]:
    """
    Build every configured block, skipping entries that fail to construct.

    Args:
        entries: (name, fragment) pairs in display order
        config: Shared bar context
        update_handle: Channel for proactive update requests

    Returns:
        Blocks that were built successfully, in configuration order
    """
    blocks = []
    for name, fragment in entries:
        try:
            blocks.append(create_block(name, fragment, config, update_handle))
        except ConfigError as e:
            logger.error(f"Skipping block {name}: {e.message}", extra={"error": e.to_dict()})
    return blocks


__all__ = [
    "BLOCKS",
    "Block",
    "ConfigBlock",
    "ProbeBlock",
    "Firewall",
    "Killswitch",
    "create_block",
    "build_blocks",
]
