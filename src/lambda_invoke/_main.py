import argparse
import logging
import os
import sys
from pathlib import Path

import yaml
from botocore.exceptions import BotoCoreError, ClientError

from lambda_invoke import __version__
from lambda_invoke.config.service import DEFAULT_STAGE, load_service
from lambda_invoke.errors import InvokeError
from lambda_invoke.invoke.input import InvocationOptions
from lambda_invoke.invoke.invoker import Invoker
from lambda_invoke.provider.aws import DEFAULT_REGION, AwsProvider


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="lambda-invoke", description="Invoke deployed serverless functions"
    )
    parser.add_argument("--version", action="version", version=f"lambda-invoke {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    invoke_parser = subparsers.add_parser("invoke", help="Invoke a deployed function")
    invoke_parser.add_argument("-f", "--function", required=True, help="Name of the function")
    invoke_parser.add_argument(
        "-s", "--stage",
        default=os.getenv("LAMBDA_INVOKE_STAGE"),
        help=f"Stage of the service (default: provider stage, then {DEFAULT_STAGE})",
    )
    invoke_parser.add_argument(
        "-r", "--region",
        default=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION"),
        help=f"AWS region (default: provider region, then {DEFAULT_REGION})",
    )
    invoke_parser.add_argument("-d", "--data", help="Input data, parsed as JSON when possible")
    invoke_parser.add_argument("-p", "--path", help="Path to a JSON or YAML file holding the input data")
    invoke_parser.add_argument(
        "-t", "--type",
        help="Type of invocation (RequestResponse, Event or DryRun; default: RequestResponse)",
    )
    invoke_parser.add_argument("-l", "--log", action="store_true", help="Print the tail of the execution log")
    invoke_parser.add_argument(
        "--config", default=".", help="Path to serverless.yml or its directory (default: current directory)"
    )
    invoke_parser.add_argument("--profile", default=os.getenv("AWS_PROFILE"), help="AWS credentials profile")
    invoke_parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def main_logic(args):
    if args.command == "invoke":
        service = load_service(Path(args.config), stage=args.stage)
        options = InvocationOptions(
            function=args.function,
            stage=args.stage or service.provider.get("stage") or DEFAULT_STAGE,
            region=args.region or service.region or DEFAULT_REGION,
            data=args.data,
            path=args.path,
            type=args.type,
            log=args.log,
        )
        invoker = Invoker(service, options, provider=AwsProvider(profile=args.profile))
        invoker.hooks["invoke:invoke"]()
    else:
        print("Unknown command", file=sys.stderr)
        sys.exit(1)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        main_logic(args)
    except (InvokeError, OSError, ValueError, yaml.YAMLError, ClientError, BotoCoreError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
