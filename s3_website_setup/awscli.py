"""
AWS CLI provider for s3-website-setup.

Shells out to the ``aws`` executable. Output of each mutating call is kept
in a log file named after the step so it can be inspected after a failure.
"""

import json
import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from .base import Identity, Provider
from .documents import create_bucket_configuration
from .errors import ApiCallFailed, NotAuthenticated, ToolMissing
from .hookspecs import hookimpl

logger = logging.getLogger(__name__)

STDIN_FILE = "file:///dev/stdin"


class AwsCliProvider(Provider):
    name = "awscli"

    def __init__(self, region: str, log_dir: str, executable: str = "aws"):
        self.region = region
        self.log_dir = Path(log_dir)
        self.executable = executable

    @classmethod
    def from_config(cls, config) -> "AwsCliProvider":
        return cls(region=config.region, log_dir=config.log_dir)

    def check_available(self) -> None:
        if shutil.which(self.executable) is None:
            raise ToolMissing("AWS CLI is not installed. Please install it first.")

    def caller_identity(self) -> Identity:
        result = self._run(["sts", "get-caller-identity", "--output", "json"])
        if result.returncode != 0:
            raise NotAuthenticated(
                "Not logged into AWS. Please run 'aws configure' or "
                "'aws sso login' first."
            )
        try:
            data = json.loads(result.stdout or "{}")
        except ValueError as ex:
            raise NotAuthenticated(f"Unexpected get-caller-identity output: {ex}")
        return Identity(
            account=data.get("Account"),
            arn=data.get("Arn"),
            user_id=data.get("UserId"),
        )

    def bucket_exists(self, bucket: str) -> bool:
        result = self._run(["s3api", "head-bucket", "--bucket", bucket])
        if result.returncode == 0:
            return True
        output = _combined(result)
        if "(404)" in output or "Not Found" in output or "NoSuchBucket" in output:
            return False
        raise ApiCallFailed("Bucket existence check", output.strip())

    def create_bucket(self, bucket: str, region: str) -> None:
        args = ["s3api", "create-bucket", "--bucket", bucket, "--region", region]
        location = create_bucket_configuration(region)
        if location is not None:
            args += [
                "--create-bucket-configuration",
                f"LocationConstraint={location['LocationConstraint']}",
            ]
        self._checked("Bucket creation", "create_bucket", args)

    def put_bucket_website(self, bucket: str, website: dict) -> None:
        self._checked(
            "Static website configuration",
            "website",
            [
                "s3api",
                "put-bucket-website",
                "--bucket",
                bucket,
                "--website-configuration",
                json.dumps(website),
            ],
        )

    def put_public_access_block(self, bucket: str, block: dict) -> None:
        shorthand = ",".join(
            f"{key}={str(value).lower()}" for key, value in block.items()
        )
        self._checked(
            "Public access configuration",
            "public_access",
            [
                "s3api",
                "put-public-access-block",
                "--bucket",
                bucket,
                "--public-access-block-configuration",
                shorthand,
            ],
        )

    def put_bucket_policy(self, bucket: str, policy: dict) -> None:
        self._checked(
            "Bucket policy",
            "policy",
            ["s3api", "put-bucket-policy", "--bucket", bucket, "--policy", STDIN_FILE],
            stdin=json.dumps(policy, indent=4),
        )

    def put_bucket_cors(self, bucket: str, cors: dict) -> None:
        self._checked(
            "CORS configuration",
            "cors",
            [
                "s3api",
                "put-bucket-cors",
                "--bucket",
                bucket,
                "--cors-configuration",
                STDIN_FILE,
            ],
            stdin=json.dumps(cors, indent=4),
        )

    def log_path(self, log_name: str) -> Path:
        return self.log_dir / f"aws_{log_name}_error.log"

    def _checked(
        self, step: str, log_name: str, args: List[str], stdin: Optional[str] = None
    ):
        result = self._run(args, stdin=stdin)
        output = _combined(result)
        self._write_log(log_name, output)
        if result.returncode != 0:
            raise ApiCallFailed(step, output.strip())
        return result

    def _write_log(self, log_name: str, output: str) -> None:
        # The captured output is still surfaced through ApiCallFailed
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.log_path(log_name).write_text(output)
        except OSError as ex:
            logger.warning("Could not write %s: %s", self.log_path(log_name), ex)

    def _run(self, args: List[str], stdin: Optional[str] = None):
        command = [self.executable] + args
        logger.debug("Running %s", " ".join(command))
        try:
            return subprocess.run(
                command,
                input=stdin,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as ex:
            raise ToolMissing(f"Could not run {self.executable}: {ex}")


def _combined(result) -> str:
    return (result.stdout or "") + (result.stderr or "")


@hookimpl
def register_providers():
    return [AwsCliProvider]
