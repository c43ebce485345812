# cli.py
import click
import functools
import logging
from botocore.exceptions import BotoCoreError, ClientError
from fossil_store.adapters import VersionedStorage, create_versioned_storage
from fossil_store.config.settings import get_settings
from fossil_store.exceptions import StorageError
from fossil_store.fossil import to_fossil

# Configure logging
logger = logging.getLogger(__name__)

WORKER = 0


def storage_command(func):
    """Pass a connected storage to the command and turn backend errors into exit codes."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            storage = create_versioned_storage(get_settings())
            return func(storage, *args, **kwargs)
        except (ClientError, BotoCoreError, StorageError) as e:
            raise click.ClickException(str(e))
    return wrapper


@click.group()
def cli():
    """Inspect and manage a versioned fossil storage bucket"""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    for key, value in settings.get_environment_dict().items():
        print(f"  {key}: {value}")


@cli.command()
def capabilities():
    """Show the capability flags the backup engine sees"""
    caps = VersionedStorage.capabilities
    print(f"  Cache needed: {caps.cache_needed}")
    print(f"  Move implemented: {caps.move_implemented}")
    print(f"  Strongly consistent: {caps.strong_consistent}")
    print(f"  Fast listing: {caps.fast_listing}")


@cli.command(name="ls")
@click.argument("directory", default="")
@storage_command
def list_files(storage, directory):
    """List files under DIRECTORY (chunks, snapshots, ...)"""
    files, sizes = storage.list_files(WORKER, directory)
    for index, name in enumerate(files):
        if index < len(sizes):
            print(f"{sizes[index]:>12}  {name}")
        else:
            print(name)


@cli.command()
@click.argument("path")
@storage_command
def stat(storage, path):
    """Show whether PATH exists and its size"""
    info = storage.get_file_info(WORKER, path)
    if not info.exists:
        print(f"{path}: not found")
        raise SystemExit(1)
    print(f"{path}: {info.size} bytes")


@cli.command()
@click.argument("name")
@storage_command
def hide(storage, name):
    """Turn NAME into a fossil"""
    storage.move_file(WORKER, name, to_fossil(name))
    print(f"✅ Hid {name}")


@cli.command()
@click.argument("name")
@storage_command
def unhide(storage, name):
    """Resurrect the fossil of NAME"""
    storage.move_file(WORKER, to_fossil(name), name)
    print(f"✅ Restored {name}")


@cli.command(name="rm")
@click.argument("path")
@storage_command
def delete_file(storage, path):
    """Delete PATH (a PATH ending in .fsl purges the whole fossil)"""
    storage.delete_file(WORKER, path)
    print(f"✅ Deleted {path}")


@cli.command()
@click.argument("local_file", type=click.File("rb"))
@click.argument("path")
@storage_command
def put(storage, local_file, path):
    """Upload LOCAL_FILE to PATH"""
    content = local_file.read()
    storage.upload_file(WORKER, path, content)
    print(f"✅ Uploaded {len(content)} bytes to {path}")


@cli.command()
@click.argument("path")
@click.argument("local_file", type=click.File("wb"))
@storage_command
def get(storage, path, local_file):
    """Download PATH into LOCAL_FILE"""
    storage.download_file(WORKER, path, local_file)
    print(f"✅ Downloaded {path}")


if __name__ == "__main__":
    cli()
