"""
boto3 provider for s3-website-setup.

Talks to S3 and STS through the AWS SDK, using the standard credential
chain (environment, shared config, SSO, instance profile).
"""

import json
import logging

import boto3
import botocore
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from .base import Identity, Provider
from .documents import create_bucket_configuration
from .errors import ApiCallFailed, NotAuthenticated
from .hookspecs import hookimpl

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"404", "NoSuchBucket", "NotFound"}


class Boto3Provider(Provider):
    """
    Provider that calls the S3 and STS APIs via boto3.

    Clients can be passed in, which is how the tests attach a Stubber.
    """

    name = "boto3"

    def __init__(self, region: str, s3_client=None, sts_client=None, session=None):
        """
        Initialize the boto3 provider.

        Args:
            region: Region the bucket lives in, used for both clients
            s3_client: Optional pre-built S3 client
            sts_client: Optional pre-built STS client
            session: Optional boto3.Session to build clients from
        """
        self.region = region
        self.session = session or boto3.session.Session(region_name=region)
        self._s3 = s3_client
        self._sts = sts_client

    @property
    def s3(self):
        if self._s3 is None:
            self._s3 = self.session.client("s3", region_name=self.region)
        return self._s3

    @property
    def sts(self):
        if self._sts is None:
            self._sts = self.session.client("sts", region_name=self.region)
        return self._sts

    def check_available(self) -> None:
        """boto3 is importable, so the SDK itself is always present."""
        logger.debug("Using botocore %s", botocore.__version__)

    def caller_identity(self) -> Identity:
        try:
            response = self.sts.get_caller_identity()
        except NoCredentialsError as error:
            raise NotAuthenticated(
                "No AWS credentials found. Please run 'aws configure' or "
                "'aws sso login' first."
            ) from error
        except (ClientError, BotoCoreError) as error:
            raise NotAuthenticated(
                f"Could not verify AWS credentials: {error}"
            ) from error
        return Identity(
            account=response.get("Account"),
            arn=response.get("Arn"),
            user_id=response.get("UserId"),
        )

    def bucket_exists(self, bucket: str) -> bool:
        """
        Check for the bucket with a HEAD request.

        Returns False only when S3 says the bucket is not there; a 403 or a
        network failure is raised instead of being read as "absent".
        """
        logger.debug("head_bucket %s", bucket)
        try:
            self.s3.head_bucket(Bucket=bucket)
        except ClientError as error:
            if _error_code(error) in NOT_FOUND_CODES:
                return False
            raise ApiCallFailed("Bucket existence check", str(error)) from error
        except BotoCoreError as error:
            raise ApiCallFailed("Bucket existence check", str(error)) from error
        return True

    def create_bucket(self, bucket: str, region: str) -> None:
        kwargs = {"Bucket": bucket}
        location = create_bucket_configuration(region)
        if location is not None:
            kwargs["CreateBucketConfiguration"] = location
        self._call("Bucket creation", self._client_for(region).create_bucket, **kwargs)

    def put_bucket_website(self, bucket: str, website: dict) -> None:
        self._call(
            "Static website configuration",
            self.s3.put_bucket_website,
            Bucket=bucket,
            WebsiteConfiguration=website,
        )

    def put_public_access_block(self, bucket: str, block: dict) -> None:
        self._call(
            "Public access configuration",
            self.s3.put_public_access_block,
            Bucket=bucket,
            PublicAccessBlockConfiguration=block,
        )

    def put_bucket_policy(self, bucket: str, policy: dict) -> None:
        self._call(
            "Bucket policy",
            self.s3.put_bucket_policy,
            Bucket=bucket,
            Policy=json.dumps(policy),
        )

    def put_bucket_cors(self, bucket: str, cors: dict) -> None:
        self._call(
            "CORS configuration",
            self.s3.put_bucket_cors,
            Bucket=bucket,
            CORSConfiguration=cors,
        )

    def _client_for(self, region: str):
        if region == self.region:
            return self.s3
        return self.session.client("s3", region_name=region)

    def _call(self, step: str, method, **kwargs):
        logger.debug("Calling S3 for %s", step)
        try:
            return method(**kwargs)
        except (ClientError, BotoCoreError) as error:
            raise ApiCallFailed(step, str(error)) from error


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code"))


@hookimpl
def register_providers():
    return [Boto3Provider]
