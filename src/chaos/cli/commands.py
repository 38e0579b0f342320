import pathlib
import sys

import click
import zrlog
from autoinject import injector

import chaos.http.client as http
from chaos.storage import StorageController, FileInfo, StorageTier
from chaos.util import ChaosError


@click.group
def main():
    zrlog.init_logging()


@main.command
@click.argument("url")
def ping(url: str):
    """Report the status code and round-trip time of a GET request."""
    try:
        response = http.get_result(url)
        print(f"{response.status_code} in {int(response.elapsed.total_seconds() * 1000)} ms")
    except ChaosError as ex:
        print(f"{ex.__class__.__name__}: {str(ex)} [{ex.obfuscated_code()}]")
        sys.exit(1)


@main.command
@click.argument("url")
@click.option("--output", default=None, help="File to write the body to, standard output if omitted")
def fetch(url: str, output: str):
    """Download a URL."""
    try:
        if output is None:
            total = http.download(url, sys.stdout.buffer)
        else:
            with open(output, "wb") as h:
                total = http.download(url, h)
        print(f"{total} bytes downloaded", file=sys.stderr)
    except ChaosError as ex:
        print(f"{ex.__class__.__name__}: {str(ex)} [{ex.obfuscated_code()}]", file=sys.stderr)
        sys.exit(1)


@main.command
@click.argument("source_file")
@click.argument("key")
@click.option("--content-type", default="application/octet-stream")
@click.option("--tier", default=StorageTier.STANDARD.value, type=click.Choice([x.value for x in StorageTier]))
@injector.inject
def upload(source_file: str, key: str, content_type: str, tier: str, controller: StorageController = None):
    """Upload a local file to the configured storage under the given key."""
    try:
        source = pathlib.Path(source_file)
        file_info = FileInfo(key, content_type=content_type, name=source.name)
        controller.get_client().upload(source, file_info, StorageTier(tier))
        print(f"Uploaded to {file_info.url}")
    except ChaosError as ex:
        print(f"{ex.__class__.__name__}: {str(ex)} [{ex.obfuscated_code()}]")
        sys.exit(1)


@main.command
@click.argument("keys", nargs=-1, required=True)
@injector.inject
def delete(keys: tuple[str], controller: StorageController = None):
    """Delete one or more keys from the configured storage."""
    try:
        controller.get_client().delete(list(keys))
        print(f"Deleted {len(keys)} file(s)")
    except ChaosError as ex:
        print(f"{ex.__class__.__name__}: {str(ex)} [{ex.obfuscated_code()}]")
        sys.exit(1)


def run():
    from chaos.boot.boot import init_chaos
    init_chaos("cli")
    main()
