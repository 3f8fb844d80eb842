"""Build/deploy glue: put the card data directory where the host reads it.

Local copies go to each directory in ASSET_DESTINATIONS. Optionally the same
tree is published to an S3-compatible bucket (R2 or S3).
"""

import mimetypes
import shutil

from cardsearch.errors import ConfigurationError
from cardsearch.settings import require


# ─── Local Copies ───────────────────────────────────────────────

def copy_tree(source, destination):
    """Recursively copy source into destination, overwriting existing files."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, destination, dirs_exist_ok=True)


def copy_assets(source, destinations):
    """Copy source to every destination. Returns the number of successful copies.

    A missing source is a no-op. A destination that cannot be written is
    reported and the remaining destinations are still attempted.
    """
    if not source.exists():
        print(f"  Warning: source directory {source} does not exist, skipping copy")
        return 0

    print(f"  Copying {source}")
    copied = 0
    for dest in destinations:
        try:
            copy_tree(source, dest)
        except (OSError, shutil.Error) as e:
            print(f"  Warning: could not copy to {dest}: {e}")
            continue
        print(f"    → {dest}")
        copied += 1

    print(f"  Copied to {copied}/{len(destinations)} destinations")
    return copied


# ─── Bucket Publishing ──────────────────────────────────────────

def get_bucket_client(settings):
    """Create an S3 client for the asset bucket with retry-friendly config."""
    import boto3
    from botocore.config import Config

    require(settings, "ASSETS_BUCKET", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY")

    config = Config(
        retries={"max_attempts": 10, "mode": "adaptive"},
        read_timeout=120,
        connect_timeout=10,
    )
    return boto3.client(
        "s3",
        endpoint_url=settings.get("ASSETS_ENDPOINT_URL"),
        aws_access_key_id=settings["AWS_ACCESS_KEY_ID"],
        aws_secret_access_key=settings["AWS_SECRET_ACCESS_KEY"],
        region_name=settings.get("AWS_DEFAULT_REGION"),
        config=config,
    )


def object_key(prefix, relative_path):
    """Bucket key for a file: prefix/relative/posix/path."""
    rel = relative_path.as_posix()
    prefix = (prefix or "").strip("/")
    return f"{prefix}/{rel}" if prefix else rel


def publish_assets(source, client, bucket, prefix=""):
    """Upload every file under source to the bucket. Returns the upload count."""
    if not source.is_dir():
        raise ConfigurationError(f"Asset source directory {source} does not exist")

    uploaded = 0
    for path in sorted(p for p in source.rglob("*") if p.is_file()):
        key = object_key(prefix, path.relative_to(source))
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        client.upload_file(str(path), bucket, key, ExtraArgs={"ContentType": content_type})
        uploaded += 1

    print(f"  Published {uploaded} files to {bucket}/{(prefix or '').strip('/')}")
    return uploaded
