"""
Loading of the service file (serverless.yml).

Only the parts the invoke command needs are read: the service name, the
provider block and the functions. Functions get their deployed name here,
``<service>-<stage>-<function>`` unless the file sets one explicitly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from lambda_invoke.errors import ConfigurationError

logger = logging.getLogger(__name__)

SERVICE_FILE_NAMES = ("serverless.yml", "serverless.yaml")
DEFAULT_STAGE = "dev"


@dataclass
class Service:
    name: str
    root: Optional[str]
    provider: Dict[str, Any] = field(default_factory=dict)
    functions: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def region(self) -> Optional[str]:
        return self.provider.get("region")


def find_service_file(directory: Path) -> Optional[Path]:
    for name in SERVICE_FILE_NAMES:
        candidate = directory / name
        if candidate.exists():
            return candidate
    return None


def deployed_function_name(service: str, stage: str, function: str) -> str:
    return f"{service}-{stage}-{function}"


def load_service(path: Path, stage: Optional[str] = None) -> Service:
    """
    Parse a service file into a Service.

    Args:
        path: Path to serverless.yml (or a directory containing one).
        stage: Stage used to name deployed functions. Falls back to the
            provider stage in the file, then "dev".
    """
    path = Path(path)
    if path.is_dir():
        path = find_service_file(path) or path / SERVICE_FILE_NAMES[0]
    if not path.exists():
        raise ConfigurationError(f"Service file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing service file {path}: {e}") from e
    if not isinstance(cfg, dict):
        raise ConfigurationError(f"Service file {path} must contain a mapping")

    service_name = cfg.get("service")
    if isinstance(service_name, dict):
        service_name = service_name.get("name")
    if not service_name:
        raise ConfigurationError(f"Service file {path} has no service name")

    provider = cfg.get("provider") or {}
    if isinstance(provider, str):
        provider = {"name": provider}
    stage = stage or provider.get("stage") or DEFAULT_STAGE

    functions = {}
    for name, function_cfg in (cfg.get("functions") or {}).items():
        function_cfg = dict(function_cfg or {})
        if not function_cfg.get("handler"):
            raise ConfigurationError(f"Function '{name}' has no handler")
        function_cfg.setdefault("name", deployed_function_name(service_name, stage, name))
        functions[name] = function_cfg

    logger.info(f"Loaded {len(functions)} functions from {path}")
    return Service(
        name=service_name,
        root=str(path.parent.resolve()),
        provider=provider,
        functions=functions,
    )
