"""
Resolution of the input payload sent to an invoked function.

The payload comes from one of three places, in priority order:
- a JSON or YAML file given with --path (relative paths are taken from the
  service root),
- an inline --data string, parsed as JSON when possible and otherwise sent
  as the raw string,
- nothing at all, in which case the payload is the empty string.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import yaml

from lambda_invoke.errors import ConfigurationError

logger = logging.getLogger(__name__)

YAML_EXTENSIONS = (".yml", ".yaml")


@dataclass
class InvocationOptions:
    function: Optional[str] = None
    stage: Optional[str] = None
    region: Optional[str] = None
    data: Any = None
    path: Optional[str] = None
    type: Optional[str] = None
    log: bool = False
    function_obj: Optional[Mapping[str, Any]] = None


def resolve(
    options: InvocationOptions,
    config_root: Optional[str],
    functions: Optional[Mapping[str, Mapping[str, Any]]],
) -> Any:
    """
    Validate the target function and resolve the invocation payload.

    Args:
        options: Options of this invocation. ``options.data`` is replaced by
            the resolved payload and ``options.function_obj`` is filled from
            ``functions`` when not already set.
        config_root: Root directory of the service; relative ``--path``
            values are joined to it.
        functions: Mapping of logical function name to function metadata.
    Returns:
        The resolved payload: a parsed structure or a plain string.
    """
    if not functions or options.function not in functions:
        raise ConfigurationError(
            f"Function '{options.function}' doesn't exist in this service"
        )
    if not config_root:
        raise ConfigurationError(
            "This command can only be run inside a service directory"
        )

    if options.function_obj is None:
        options.function_obj = functions[options.function]

    if options.path:
        payload = _read_payload_file(_absolute_path(options.path, config_root))
    else:
        payload = parse_data(options.data)

    options.data = payload
    return payload


def parse_data(data: Optional[str]) -> Any:
    """Parse inline data as JSON, keeping the raw string when it isn't JSON."""
    if data is None:
        return ""
    if not isinstance(data, str):
        # Already resolved.
        return data
    try:
        return json.loads(data, parse_constant=_reject_constant)
    except ValueError:
        logger.debug("Inline data is not JSON, sending it as a plain string")
        return data


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _absolute_path(path: str, config_root: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(config_root, path)


def _read_payload_file(path: str) -> Any:
    if not os.path.isfile(path):
        raise FileNotFoundError("The file you provided does not exist.")
    logger.debug(f"Reading invocation payload from {path}")
    with open(path, "r", encoding="utf-8") as f:
        if path.lower().endswith(YAML_EXTENSIONS):
            return yaml.safe_load(f)
        return json.load(f)
