"""
Unit tests for the S3 buckets and their lifecycle rules.
"""

from aws_cdk import assertions


def _bucket_with_rule(template, rule_id):
    buckets = template.find_resources("AWS::S3::Bucket", {
        "Properties": {
            "LifecycleConfiguration": {
                "Rules": assertions.Match.array_with([
                    assertions.Match.object_like({"Id": rule_id}),
                ]),
            },
        },
    })
    assert len(buckets) == 1, rule_id
    return next(iter(buckets.values()))["Properties"]


def _rule(bucket_properties, rule_id):
    return next(
        rule for rule in bucket_properties["LifecycleConfiguration"]["Rules"] if rule["Id"] == rule_id
    )


class TestStorage:
    """Test the ALB log bucket and the static asset bucket."""

    def test_two_buckets(self, template):
        template.resource_count_is("AWS::S3::Bucket", 2)

    def test_alb_log_lifecycle(self, template):
        bucket = _bucket_with_rule(template, "ALBLogLifecycle")
        rule = _rule(bucket, "ALBLogLifecycle")

        assert rule["Status"] == "Enabled"
        assert rule["ExpirationInDays"] == 365
        assert rule["AbortIncompleteMultipartUpload"] == {"DaysAfterInitiation": 7}
        assert rule["Transitions"] == [
            {"StorageClass": "STANDARD_IA", "TransitionInDays": 30},
            {"StorageClass": "GLACIER_IR", "TransitionInDays": 90},
        ]

    def test_alb_log_bucket_is_private_and_s3_encrypted(self, template):
        bucket = _bucket_with_rule(template, "ALBLogLifecycle")

        assert bucket["PublicAccessBlockConfiguration"] == {
            "BlockPublicAcls": True,
            "BlockPublicPolicy": True,
            "IgnorePublicAcls": True,
            "RestrictPublicBuckets": True,
        }
        encryption = bucket["BucketEncryption"]["ServerSideEncryptionConfiguration"][0]
        assert encryption["ServerSideEncryptionByDefault"]["SSEAlgorithm"] == "AES256"

    def test_static_bucket_is_versioned(self, template):
        bucket = _bucket_with_rule(template, "StaticAssetCurrentVersionLifecycle")

        assert bucket["VersioningConfiguration"] == {"Status": "Enabled"}
        current = _rule(bucket, "StaticAssetCurrentVersionLifecycle")
        assert current["Transitions"] == [{"StorageClass": "STANDARD_IA", "TransitionInDays": 90}]

    def test_static_bucket_noncurrent_versions(self, template):
        bucket = _bucket_with_rule(template, "StaticAssetNonCurrentVersionLifecycle")
        rule = _rule(bucket, "StaticAssetNonCurrentVersionLifecycle")

        assert rule["NoncurrentVersionTransitions"] == [
            {"StorageClass": "STANDARD_IA", "TransitionInDays": 30},
        ]
        assert rule["NoncurrentVersionExpiration"] == {
            "NoncurrentDays": 90,
            "NewerNoncurrentVersions": 3,
        }

    def test_buckets_are_emptied_on_delete(self, template):
        template.resource_count_is("Custom::S3AutoDeleteObjects", 2)

    def test_ssl_enforced(self, template):
        template.has_resource_properties("AWS::S3::BucketPolicy", {
            "PolicyDocument": {
                "Statement": assertions.Match.array_with([
                    assertions.Match.object_like({
                        "Effect": "Deny",
                        "Condition": {"Bool": {"aws:SecureTransport": "false"}},
                    }),
                ]),
            },
        })
