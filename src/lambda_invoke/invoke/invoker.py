import logging
from typing import Any, Optional

from lambda_invoke.config.service import Service
from lambda_invoke.invoke.client import InvocationClient, InvocationProvider, InvocationReply
from lambda_invoke.invoke.input import InvocationOptions, resolve
from lambda_invoke.invoke.render import ResultRenderer
from lambda_invoke.provider.aws import AwsProvider


class Invoker:
    """
    Runs the invoke command for one function: validate and resolve the input,
    invoke the function, then log the reply.
    """

    def __init__(
        self,
        service: Service,
        options: Optional[InvocationOptions] = None,
        provider: Optional[InvocationProvider] = None,
        renderer: Optional[ResultRenderer] = None,
    ):
        self.service = service
        self.options = options if options is not None else InvocationOptions()
        self.provider = provider if provider is not None else AwsProvider()
        self.renderer = renderer or ResultRenderer()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.hooks = {"invoke:invoke": self.run}

    def run(self) -> None:
        self.extended_validate()
        reply = self.invoke()
        self.log(reply)

    def extended_validate(self) -> Any:
        payload = resolve(self.options, self.service.root, self.service.functions)
        self.logger.debug(f"Resolved payload for '{self.options.function}': {payload!r}")
        return payload

    def invoke(self) -> InvocationReply:
        return InvocationClient(self.provider).invoke(self.options, self.options.data)

    def log(self, reply: InvocationReply) -> None:
        self.renderer.render(reply)
