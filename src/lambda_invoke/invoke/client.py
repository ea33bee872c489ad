"""
Builds the invocation request and hands it to the provider.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Union

from lambda_invoke.errors import ConfigurationError
from lambda_invoke.invoke.input import InvocationOptions

DEFAULT_INVOCATION_TYPE = "RequestResponse"


def _empty_to_object(payload: Any) -> Any:
    # No input is sent as an empty event object.
    if payload is None or payload == "":
        return {}
    return payload


class InvocationProvider(Protocol):
    def request(
        self,
        service: str,
        method: str,
        params: Mapping[str, Any],
        stage: Optional[str],
        region: Optional[str],
    ) -> Any:
        ...


@dataclass(frozen=True)
class InvocationRequest:
    function_name: str
    invocation_type: str
    log_type: str
    payload: bytes

    @classmethod
    def build(cls, options: InvocationOptions, payload: Any) -> "InvocationRequest":
        function_obj = options.function_obj
        if not isinstance(function_obj, Mapping) or not function_obj.get("name"):
            raise ConfigurationError(
                f"Function '{options.function}' has no deployed name"
            )
        return cls(
            function_name=function_obj["name"],
            invocation_type=options.type or DEFAULT_INVOCATION_TYPE,
            log_type="Tail" if options.log else "None",
            payload=json.dumps(_empty_to_object(payload)).encode("utf-8"),
        )

    def as_params(self) -> Dict[str, Any]:
        return {
            "FunctionName": self.function_name,
            "InvocationType": self.invocation_type,
            "LogType": self.log_type,
            "Payload": self.payload,
        }


@dataclass(frozen=True)
class InvocationReply:
    payload: str = ""
    log_result: Optional[str] = None
    function_error: Union[str, bool, None] = None
    status_code: Optional[int] = None
    executed_version: Optional[str] = None

    @classmethod
    def from_response(cls, response: Optional[Mapping[str, Any]]) -> "InvocationReply":
        """
        Adapt a raw Lambda ``invoke`` response. The ``Payload`` may be a
        string, bytes or a streaming body as returned by boto3.
        """
        response = response or {}
        payload = response.get("Payload")
        if hasattr(payload, "read"):
            payload = payload.read()
        if isinstance(payload, (bytes, bytearray)):
            payload = payload.decode("utf-8")
        return cls(
            payload=payload if payload is not None else "",
            log_result=response.get("LogResult"),
            function_error=response.get("FunctionError"),
            status_code=response.get("StatusCode"),
            executed_version=response.get("ExecutedVersion"),
        )


class InvocationClient:
    """
    Issues exactly one invocation through the provider. Provider errors are
    not caught or retried.
    """

    def __init__(self, provider: InvocationProvider):
        self.provider = provider
        self.logger = logging.getLogger(self.__class__.__name__)

    def invoke(self, options: InvocationOptions, payload: Any) -> InvocationReply:
        request = InvocationRequest.build(options, payload)
        self.logger.info(
            f"Invoking {request.function_name} "
            f"(type={request.invocation_type}, log={request.log_type})"
        )
        response = self.provider.request(
            "Lambda",
            "invoke",
            request.as_params(),
            options.stage,
            options.region,
        )
        if isinstance(response, InvocationReply):
            return response
        return InvocationReply.from_response(response)
