"""
AWS provider backed by boto3.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Mapping, Optional, Tuple

import boto3

DEFAULT_REGION = "us-east-1"


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


class AwsProvider:
    """
    Makes AWS API calls on behalf of the CLI. A call is addressed by service
    and method name the way the service file names them ("Lambda", "invoke")
    and is dispatched to the matching boto3 client method.
    """

    def __init__(self, profile: Optional[str] = None, session: Any = None):
        self.session = session or boto3.session.Session(profile_name=profile)
        self.logger = logging.getLogger(self.__class__.__name__)
        self._clients: Dict[Tuple[str, str], Any] = {}

    def client(self, service: str, region: Optional[str] = None) -> Any:
        region = region or self.session.region_name or DEFAULT_REGION
        key = (service.lower(), region)
        if key not in self._clients:
            self._clients[key] = self.session.client(key[0], region_name=region)
        return self._clients[key]

    def request(
        self,
        service: str,
        method: str,
        params: Mapping[str, Any],
        stage: Optional[str] = None,
        region: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Call ``method`` on the boto3 client for ``service`` and return its
        response. botocore errors are raised as-is.
        """
        client = self.client(service, region)
        self.logger.debug(f"{service}.{method} (stage={stage}, region={region})")
        return getattr(client, _snake_case(method))(**params)
