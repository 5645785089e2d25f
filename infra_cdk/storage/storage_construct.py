"""
S3 buckets for the application: ALB access logs and static assets.

Both carry lifecycle rules that move objects to cheaper storage classes over
time.
"""

from typing import Optional

from aws_cdk import (
    Duration,
    RemovalPolicy,
    aws_s3 as s3,
)
from constructs import Construct


class StorageConstruct(Construct):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        static_bucket_name: Optional[str] = None,
    ) -> None:
        super().__init__(scope, construct_id)

        # ALB access logs: Standard -> IA (30d) -> Glacier IR (90d) -> deleted (365d)
        # ELB log delivery only supports S3-managed encryption
        alb_log_bucket = s3.Bucket(
            self,
            "ALBLogBucket",
            removal_policy=RemovalPolicy.DESTROY,
            auto_delete_objects=True,
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            lifecycle_rules=[
                s3.LifecycleRule(
                    id="ALBLogLifecycle",
                    enabled=True,
                    transitions=[
                        s3.Transition(
                            storage_class=s3.StorageClass.INFREQUENT_ACCESS,
                            transition_after=Duration.days(30),
                        ),
                        s3.Transition(
                            storage_class=s3.StorageClass.GLACIER_INSTANT_RETRIEVAL,
                            transition_after=Duration.days(90),
                        ),
                    ],
                    expiration=Duration.days(365),
                    abort_incomplete_multipart_upload_after=Duration.days(7),
                )
            ],
        )

        # Static assets: versioned, old versions are moved to IA then expired
        static_bucket = s3.Bucket(
            self,
            "StaticBucket",
            bucket_name=static_bucket_name or None,
            versioned=True,
            removal_policy=RemovalPolicy.DESTROY,  # For development - change to RETAIN for production
            auto_delete_objects=True,
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            lifecycle_rules=[
                s3.LifecycleRule(
                    id="StaticAssetCurrentVersionLifecycle",
                    enabled=True,
                    transitions=[
                        s3.Transition(
                            storage_class=s3.StorageClass.INFREQUENT_ACCESS,
                            transition_after=Duration.days(90),
                        )
                    ],
                    abort_incomplete_multipart_upload_after=Duration.days(7),
                ),
                s3.LifecycleRule(
                    id="StaticAssetNonCurrentVersionLifecycle",
                    enabled=True,
                    noncurrent_version_transitions=[
                        s3.NoncurrentVersionTransition(
                            storage_class=s3.StorageClass.INFREQUENT_ACCESS,
                            transition_after=Duration.days(30),
                        )
                    ],
                    noncurrent_version_expiration=Duration.days(90),
                    # Keep only the 3 most recent noncurrent versions
                    noncurrent_versions_to_retain=3,
                ),
            ],
        )

        self.alb_log_bucket = alb_log_bucket
        self.static_bucket = static_bucket
