"""
Documents submitted to S3 when configuring a bucket as a public website.
"""

S3_DEFAULT_REGION = "us-east-1"


def website_configuration(index_document: str, error_document: str) -> dict:
    return {
        "IndexDocument": {"Suffix": index_document},
        "ErrorDocument": {"Key": error_document},
    }


def public_access_block() -> dict:
    # All four flags off, otherwise the bucket policy below is overridden
    return {
        "BlockPublicAcls": False,
        "IgnorePublicAcls": False,
        "BlockPublicPolicy": False,
        "RestrictPublicBuckets": False,
    }


def public_read_policy(bucket: str) -> dict:
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Sid": "PublicReadGetObject",
                "Effect": "Allow",
                "Principal": "*",
                "Action": "s3:GetObject",
                "Resource": f"arn:aws:s3:::{bucket}/*",
            }
        ],
    }


def cors_configuration() -> dict:
    return {
        "CORSRules": [
            {
                "AllowedHeaders": ["*"],
                "AllowedMethods": ["GET", "HEAD"],
                "AllowedOrigins": ["*"],
                "ExposeHeaders": [],
            }
        ]
    }


def create_bucket_configuration(region: str):
    """
    LocationConstraint for create_bucket, or None for us-east-1.

    S3 rejects an explicit LocationConstraint of us-east-1.
    """
    if region == S3_DEFAULT_REGION:
        return None
    return {"LocationConstraint": region}


def website_endpoint(bucket: str, region: str) -> str:
    return f"http://{bucket}.s3-website.{region}.amazonaws.com"
