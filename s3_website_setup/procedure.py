"""
The provisioning procedure: configure an S3 bucket as a public static website.

Every remote change is applied in place and none are rolled back, so a
failed run leaves the earlier steps' configuration on the bucket.
"""

import logging
import time

from . import documents
from .base import Provider
from .config import SiteConfig
from .console import YELLOW, Console
from .errors import ApiCallFailed, ConsistencyTimeout, CorsConfigurationFailed
from .runner import RunResult, Runner, State, Step

logger = logging.getLogger(__name__)

NEXT_STEPS = [
    "1. Update your GitHub secrets with AWS credentials",
    "2. Push to the master branch to trigger deployment",
    "3. (Optional) Set up CloudFront for HTTPS and custom domain",
]
CI_SECRETS = ["AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY"]


class Provisioner:
    def __init__(
        self,
        config: SiteConfig,
        provider: Provider,
        console: Console = None,
        sleep=time.sleep,
    ):
        self.config = config
        self.provider = provider
        self.console = console or Console()
        self.sleep = sleep
        self.identity = None
        self.bucket_exists = None

    def steps(self):
        return [
            Step("check-tool", self.check_tool, State.TOOL_CHECKED),
            Step("check-credentials", self.check_credentials, State.AUTHENTICATED),
            Step("existence-probe", self.probe_existence, State.EXISTENCE_KNOWN),
            Step(
                "create-bucket",
                self.create_bucket,
                State.CREATED,
                failure="Failed to create bucket. See error above.",
            ),
            Step(
                "website",
                self.configure_website,
                State.WEBSITE_CONFIGURED,
                failure="Failed to configure static website hosting.",
            ),
            Step(
                "public-access",
                self.configure_public_access,
                State.PUBLIC_ACCESS_CONFIGURED,
                failure="Failed to configure public access settings.",
            ),
            Step(
                "policy",
                self.apply_policy,
                State.POLICY_APPLIED,
                failure="Failed to apply bucket policy.",
            ),
            Step("cors", self.configure_cors, State.CORS_ATTEMPTED, fatal=False),
            Step("summary", self.summary, State.DONE),
        ]

    def run(self) -> RunResult:
        self.console.banner("S3 Static Website Setup")
        self.console.info(f"Bucket Name: {self.config.bucket}")
        self.console.info(f"Region: {self.config.region}")
        self.console.info()
        result = Runner(self.steps(), on_warning=self._warn).run()
        if not result.ok:
            self._report_failure(result)
        return result

    def check_tool(self):
        self.provider.check_available()

    def check_credentials(self):
        self.console.info("Checking AWS credentials...")
        self.identity = self.provider.caller_identity()
        self.console.info("Logged in as:")
        self.console.info(f"  Account: {self.identity.account}")
        self.console.info(f"  Arn: {self.identity.arn}")
        self.console.info(f"  UserId: {self.identity.user_id}")
        self.console.info()

    def probe_existence(self):
        self.console.info("Checking if bucket already exists...")
        self.bucket_exists = self.provider.bucket_exists(self.config.bucket)
        if not self.bucket_exists:
            self.console.info("Bucket does not exist. Creating...")
            return
        self.console.warning(f"Bucket '{self.config.bucket}' already exists!")
        if self._consent_to_reconfigure():
            self.console.warning("Will reconfigure existing bucket...")
        else:
            self.console.info("Skipping bucket creation...")

    def _consent_to_reconfigure(self) -> bool:
        if self.config.assume_yes or not self.config.interactive:
            return True
        return self.console.confirm("Do you want to reconfigure it?")

    def create_bucket(self):
        if self.bucket_exists:
            return State.SKIPPED
        bucket, region = self.config.bucket, self.config.region
        self.console.info(f"Creating S3 bucket '{bucket}' in region '{region}'...")
        self.provider.create_bucket(bucket, region)
        self.console.success("Bucket created successfully!")
        self.wait_until_visible()

    def wait_until_visible(self):
        self.console.info("Waiting for bucket to be available...")
        for attempt, delay in enumerate(self.config.wait_delays(), start=1):
            self.sleep(delay)
            try:
                visible = self.provider.bucket_exists(self.config.bucket)
            except ApiCallFailed as error:
                raise ConsistencyTimeout(
                    "Bucket was created but could not be verified: "
                    f"{error.output or error}. Run the script again to finish "
                    "configuring it."
                ) from error
            if visible:
                self.console.success("Bucket is now available!")
                return
            logger.debug("Bucket not visible after attempt %d", attempt)
        raise ConsistencyTimeout(
            "Bucket was created but is not yet available. "
            "Please wait a moment and run the script again."
        )

    def configure_website(self):
        self.console.info()
        self.console.info("Configuring static website hosting...")
        self.provider.put_bucket_website(
            self.config.bucket,
            documents.website_configuration(
                self.config.index_document, self.config.error_document
            ),
        )
        self.console.success("Static website hosting configured!")

    def configure_public_access(self):
        self.console.info()
        self.console.info("Configuring public access settings...")
        self.provider.put_public_access_block(
            self.config.bucket, documents.public_access_block()
        )
        self.console.success("Public access settings configured!")
        if self.config.propagation_delay:
            self.console.info("Waiting for settings to propagate...")
            self.sleep(self.config.propagation_delay)

    def apply_policy(self):
        self.console.info()
        self.console.info("Applying bucket policy for public read access...")
        self.provider.put_bucket_policy(
            self.config.bucket, documents.public_read_policy(self.config.bucket)
        )
        self.console.success("Bucket policy applied successfully!")

    def configure_cors(self):
        self.console.info()
        self.console.info("Configuring CORS...")
        try:
            self.provider.put_bucket_cors(
                self.config.bucket, documents.cors_configuration()
            )
        except ApiCallFailed as error:
            raise CorsConfigurationFailed(error.step, error.output) from error
        self.console.success("CORS configuration applied!")

    def summary(self):
        bucket, region = self.config.bucket, self.config.region
        self.console.info()
        self.console.banner("Setup Complete!")
        self.console.info(f"Bucket Name: {bucket}")
        self.console.info(f"Region: {region}")
        self.console.info(
            f"Website Endpoint: {documents.website_endpoint(bucket, region)}"
        )
        self.console.info()
        self.console.heading("Next Steps:", code=YELLOW)
        for line in NEXT_STEPS:
            self.console.info(line)
        self.console.info()
        self.console.heading("GitHub Secrets needed:")
        for name in CI_SECRETS:
            self.console.info(f"  - {name}")
        self.console.info()

    def _warn(self, step, error):
        if error.output:
            self.console.info(error.output)
        self.console.warning(
            "Failed to apply CORS configuration (this may not be critical)."
        )

    def _report_failure(self, result: RunResult):
        error = result.error
        failure = result.failed_step.failure
        if isinstance(error, ApiCallFailed) and failure:
            if error.output:
                self.console.info(error.output)
            self.console.error(failure)
        else:
            self.console.error(str(error))


def provision(
    config: SiteConfig,
    provider: Provider,
    console: Console = None,
    sleep=time.sleep,
) -> RunResult:
    return Provisioner(config, provider, console=console, sleep=sleep).run()
