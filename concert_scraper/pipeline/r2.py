import boto3

from concert_scraper.pipeline.runlog import print_log


def _client(r2_config):
    return boto3.client(
        "s3",
        endpoint_url=f"https://{r2_config.account_id}.r2.cloudflarestorage.com",
        aws_access_key_id=r2_config.access_key_id,
        aws_secret_access_key=r2_config.secret_access_key,
    )


def download_from_r2(r2_config, key, local_path, log_func=None):
    """
    Download a file from R2 if it exists.
    Returns True if downloaded, False if not configured, not found or error.
    """
    log = log_func or print_log
    if not r2_config or not r2_config.enabled:
        return False

    try:
        response = _client(r2_config).get_object(Bucket=r2_config.bucket_name, Key=key)
        local_path.parent.mkdir(parents=True, exist_ok=True)
        with open(local_path, "wb") as f:
            f.write(response["Body"].read())
        return True
    except Exception as e:
        log(f"  R2 download of {key} skipped: {e}", "WARNING")
        return False


def upload_to_r2(r2_config, key, local_path, log_func=None):
    """
    Upload a local file to R2.
    Returns True if successful, False otherwise.
    """
    log = log_func or print_log
    if not r2_config or not r2_config.enabled:
        return False
    if not local_path.exists():
        return False

    try:
        with open(local_path, "rb") as f:
            _client(r2_config).put_object(
                Bucket=r2_config.bucket_name,
                Key=key,
                Body=f.read(),
                ContentType="application/json",
            )
        log(f"Uploaded to R2: {key}")
        return True
    except Exception as e:
        log(f"R2 upload failed: {e}", "WARNING")
        return False
