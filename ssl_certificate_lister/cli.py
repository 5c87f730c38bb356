"""
命令行入口 lscerts
"""
import sys

import click

from .auditor import CertificateAuditor
from .services.config_validator import VALID_LOG_LEVELS
from .services.logger import LoggerService
from .services.report_writer import PROGRAM_NAME, CSVReportWriter
from .services.ssl_checker import DEFAULT_CONNECT_TIMEOUT
from .services.url_source import URLSource

EXIT_OPEN_ERROR = 3
EXIT_READ_ERROR = 4

HELP = """Lscerts lists certificates in the order they will expire.

It reads a list of HTTPS URLs from FILE or standard input, one URL per line.
Blank lines and lines starting "#" are ignored. For each URL, it writes
details of the leaf certificate or an error.

Details are written as comma separated values:
expires, toExpiry, URL, serialNumber and issuerCN, sorted by expiry date.
Certificates are validated against the CAs trusted by the operating system.
"""


@click.command(help=HELP, context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("file", required=False, default="-", type=click.Path(dir_okay=False, allow_dash=True))
@click.option("-n", "no_header", is_flag=True, help="Do not write header for certificate details.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_CONNECT_TIMEOUT,
    envvar="CONNECT_TIMEOUT",
    show_default=True,
    help="Seconds to wait for each TCP connection.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=1,
    envvar="MAX_WORKERS",
    show_default=True,
    help="Number of URLs to check at the same time.",
)
@click.option(
    "--log-level",
    type=click.Choice(VALID_LOG_LEVELS, case_sensitive=False),
    default="ERROR",
    envvar="LOG_LEVEL",
    show_default=True,
    help="Level of diagnostic logging written to standard error.",
)
def main(file: str, no_header: bool, timeout: float, workers: int, log_level: str) -> None:
    try:
        stream = click.open_file(file, "r")
    except OSError as error:
        click.secho(f"{PROGRAM_NAME}: {error}", fg="red", err=True)
        sys.exit(EXIT_OPEN_ERROR)

    writer = CSVReportWriter(header=not no_header)
    auditor = CertificateAuditor(
        logger_service=LoggerService(log_level=log_level),
        timeout=timeout,
        max_workers=workers,
    )

    with stream:
        try:
            report = auditor.audit(URLSource().read_lines(stream), on_failure=writer.write_failure)
        except (OSError, UnicodeDecodeError) as error:
            click.secho(f"{PROGRAM_NAME}: {error}", fg="red", err=True)
            sys.exit(EXIT_READ_ERROR)

    writer.write_report(report)


if __name__ == "__main__":
    main()
