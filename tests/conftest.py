import io

import pytest

from s3_website_setup.base import Identity, Provider
from s3_website_setup.config import SiteConfig
from s3_website_setup.console import Console
from s3_website_setup.errors import ApiCallFailed, NotAuthenticated, ToolMissing


class FakeProvider(Provider):
    """In-memory S3: records every call and fails the operations named in ``fail``."""

    name = "fake"

    def __init__(self, region="af-south-1", exists=False, visible_after=1, fail=()):
        self.region = region
        self.exists = exists
        # Number of post-creation probes that must happen before the bucket shows up
        self.visible_after = visible_after
        self.fail = set(fail)
        self.calls = []
        self.buckets = {}
        self.probes_since_create = 0
        self.created = False

    def _record(self, operation, *args):
        self.calls.append(operation)
        if operation in self.fail:
            if operation == "check_available":
                raise ToolMissing("AWS CLI is not installed. Please install it first.")
            if operation == "caller_identity":
                raise NotAuthenticated("Not logged into AWS.")
            raise ApiCallFailed(operation, f"An error occurred calling {operation}")

    def check_available(self):
        self._record("check_available")

    def caller_identity(self):
        self._record("caller_identity")
        return Identity(
            account="123456789012",
            arn="arn:aws:iam::123456789012:user/deploy",
            user_id="AIDAEXAMPLE",
        )

    def bucket_exists(self, bucket):
        self._record("bucket_exists", bucket)
        if self.exists:
            return True
        if self.created:
            self.probes_since_create += 1
            return self.probes_since_create >= self.visible_after
        return False

    def create_bucket(self, bucket, region):
        self._record("create_bucket", bucket, region)
        self.created = True
        self.buckets[bucket] = {"region": region}

    def _put(self, operation, bucket, document):
        self._record(operation, bucket)
        self.buckets.setdefault(bucket, {})[operation] = document

    def put_bucket_website(self, bucket, website):
        self._put("put_bucket_website", bucket, website)

    def put_public_access_block(self, bucket, block):
        self._put("put_public_access_block", bucket, block)

    def put_bucket_policy(self, bucket, policy):
        self._put("put_bucket_policy", bucket, policy)

    def put_bucket_cors(self, bucket, cors):
        self._put("put_bucket_cors", bucket, cors)


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def config(tmp_path):
    return SiteConfig(
        bucket="mozedu-frontend-prod-af",
        region="af-south-1",
        interactive=False,
        log_dir=str(tmp_path),
    )


@pytest.fixture
def console():
    return Console(out=io.StringIO(), err=io.StringIO(), color=False)


@pytest.fixture
def sleeps():
    return []
