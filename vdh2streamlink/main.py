import argparse
import asyncio
import logging
import shutil
import sys
from typing import List, Optional

from pydantic import ValidationError
from rich.markup import escape

from vdh2streamlink import __version__
from vdh2streamlink.config.settings import EnvSettings, config
from vdh2streamlink.core.errors import Vdh2StreamlinkError, ToolNotFound
from vdh2streamlink.core.logging import LOGGER_NAME, console, log_file_path, setup_logging, status_console, streamlink_log_level
from vdh2streamlink.models.request import StreamRequestDescriptor
from vdh2streamlink.services.curl import CurlConverter
from vdh2streamlink.services.extension import ExtensionResolver
from vdh2streamlink.services.input import read_clipboard, read_input_file
from vdh2streamlink.services.output import OutputPathLifecycle
from vdh2streamlink.services.streamlink import StreamlinkService
from vdh2streamlink.services.vdh import parse_details_dump
from vdh2streamlink.utils.filename import default_output_name, expand_tilde, sanitize_output_path
from vdh2streamlink.utils.media_types import load_media_extensions

logger = logging.getLogger(LOGGER_NAME)

EXIT_FAILURE = 1

DESCRIPTION = """\
Download an HLS stream with Streamlink from a Video DownloadHelper "Details"
dump or a "copy as cURL" command.

Verbosity is taken from the environment: DEBUG=0 (default), DEBUG=1 or DEBUG=2.
"""


class UsageError(Exception):
    pass


class CliParser(argparse.ArgumentParser):
    """argparse exits with 2 on bad usage; this tool always uses 1"""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = CliParser(
        prog="vdh2streamlink",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-f", "--format",
        required=True,
        type=str.lower,
        choices=["vdh", "curl"],
        help="'vdh' for a Video DownloadHelper details dump, 'curl' for a 'copy as cURL' command"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-c", "--clipboard",
        action="store_true",
        help="read input data from the clipboard"
    )
    source.add_argument(
        "-i", "--input",
        metavar="FILE",
        help="read input data from a text file"
    )
    parser.add_argument(
        "-o", "--output",
        metavar="NAME",
        help="output filename, extension optional (default: newVideo_{timestamp}.{ts/mp4})"
    )
    parser.add_argument(
        "-l", "--logfile",
        action="store_true",
        help="also write logs to SL_logs/ next to the output file"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_output_base(output: Optional[str]) -> str:
    if output:
        return sanitize_output_path(expand_tilde(output))
    return default_output_name(config.output.default_basename)


async def load_request(input_format: str, data: str) -> StreamRequestDescriptor:
    if input_format == "vdh":
        logger.debug("The following is your input data (whose format is supposed to conform to VDH details dump):\n%s", data)
        dump = parse_details_dump(data)
        summary = dump.summary_lines()
        if summary:
            logger.debug(
                "From the VDH details dump, we infer the following basic information about the media stream:\n%s",
                "\n".join(summary)
            )
        curl_command = dump.to_curl_command()
        logger.debug("The following is the cURL command we managed to construct based on your VDH details dump:\n%s", curl_command)
    else:
        logger.debug("The following is your input data (whose format is supposed to conform to cURL command):\n%s", data)
        curl_command = data

    request = await CurlConverter().to_descriptor(curl_command)

    if request.headers:
        logger.debug(
            "The headers which will be passed to Streamlink:\n%s",
            "\n".join(f"  [--http-header] [{name}={value}]" for name, value in request.headers)
        )
    logger.debug("The URL which will be passed to Streamlink:\n  [%s]", request.url)
    return request


async def run(args: argparse.Namespace, verbosity: int) -> str:
    """Whole download; returns the final media file path"""
    output_base = resolve_output_base(args.output)

    log_file = None
    if args.logfile:
        log_file = str(log_file_path(output_base))
        setup_logging(verbosity, log_file)
        console.print(f"Both debug and error messages will be written to the log file [yellow]'{escape(log_file)}'[/yellow]\n")
    elif verbosity > 0:
        console.print("Debug messages will be written to [yellow]stderr[/yellow]\n")

    if args.clipboard:
        data = await read_clipboard()
    else:
        data = read_input_file(args.input)

    request = await load_request(args.format, data)

    if shutil.which(config.streamlink.executable) is None:
        raise ToolNotFound("the 'Streamlink' package is missing, please install it first")

    streamlink = StreamlinkService()
    extension = await ExtensionResolver(streamlink=streamlink).resolve(request)

    lifecycle = OutputPathLifecycle(load_media_extensions(config.output.mime_globs_path))
    working_path = lifecycle.attach_extension(output_base, extension)
    reserved_path = lifecycle.begin(working_path)

    status_console.print(f"Running Streamlink → '{escape(reserved_path)}'")
    try:
        await streamlink.download(
            request,
            reserved_path,
            log_level=streamlink_log_level(verbosity),
            log_file=log_file
        )
    except BaseException:
        # Ctrl-C included
        lifecycle.discard(reserved_path)
        raise

    final_path = lifecycle.finalize(reserved_path)
    status_console.print(f"Download is complete, enjoy your new media file [yellow]'{escape(final_path)}'[/yellow]")
    return final_path


def fail(message: str, parser: Optional[argparse.ArgumentParser] = None) -> int:
    if logger.handlers:
        logger.error("The script exited with error-code 1 because: %s", message)
    else:
        console.print(f"The script exited with error-code 1 because: [red]{escape(message)}[/red]", highlight=False)
    if parser is not None:
        parser.print_usage(sys.stderr)
    return EXIT_FAILURE


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        return fail(str(e), parser)

    try:
        verbosity = EnvSettings().debug
    except ValidationError as e:
        return fail(e.errors()[0]["msg"], parser)

    setup_logging(verbosity)

    try:
        asyncio.run(run(args, verbosity))
    except Vdh2StreamlinkError as e:
        return fail(str(e))
    except OSError as e:
        return fail(str(e))
    except KeyboardInterrupt:
        return fail("interrupted by the user")

    return 0


if __name__ == "__main__":
    sys.exit(main())
