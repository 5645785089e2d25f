"""
CloudFront construct in front of the ALB.

CloudFront attaches the secret origin-verification header to every request
so the ALB can tell CloudFront traffic from direct internet traffic. Static
assets are served straight from S3 through origin access control. Route53
alias records point the apex and www names at the distribution.
"""

from typing import Optional

from aws_cdk import (
    CfnOutput,
    aws_certificatemanager as acm,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as origins,
    aws_route53 as route53,
    aws_route53_targets as route53_targets,
    aws_s3 as s3,
)
from constructs import Construct


class CloudFrontConstruct(Construct):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        origin_domain_name: str,
        certificate: acm.ICertificate,
        domain_name: str,
        hosted_zone: route53.IHostedZone,
        custom_header_name: str,
        custom_header_value: str,
        static_bucket: Optional[s3.IBucket] = None,
        waf_arn: Optional[str] = None,
    ) -> None:
        """
        Initialize the CloudFront construct.

        Args:
            scope (Construct): CDK construct scope.
            construct_id (str): Unique identifier for the construct.
            origin_domain_name (str): HTTPS host name of the ALB origin.
            certificate (acm.ICertificate): Viewer certificate (must live in us-east-1).
            domain_name (str): Apex domain served by the distribution.
            hosted_zone (route53.IHostedZone): Zone receiving the alias records.
            custom_header_name (str): Origin-verification header name.
            custom_header_value (str): Origin-verification header value.
            static_bucket (Optional[s3.IBucket]): Bucket served under /static/*.
            waf_arn (Optional[str]): CLOUDFRONT-scoped web ACL ARN from the WAF stack.
        """
        super().__init__(scope, construct_id)

        www_domain_name = f"www.{domain_name}"

        alb_origin = origins.HttpOrigin(
            origin_domain_name,
            protocol_policy=cloudfront.OriginProtocolPolicy.HTTPS_ONLY,
            custom_headers={custom_header_name: custom_header_value},
        )

        additional_behaviors = {}
        if static_bucket is not None:
            additional_behaviors["/static/*"] = cloudfront.BehaviorOptions(
                origin=origins.S3BucketOrigin.with_origin_access_control(static_bucket),
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                compress=True,
            )

        distribution = cloudfront.Distribution(
            self,
            "SiteDistribution",
            default_behavior=cloudfront.BehaviorOptions(
                origin=alb_origin,
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                allowed_methods=cloudfront.AllowedMethods.ALLOW_ALL,
                compress=True,
                # Dynamic application: no caching, forward viewer headers except Host
                cache_policy=cloudfront.CachePolicy.CACHING_DISABLED,
                origin_request_policy=cloudfront.OriginRequestPolicy.ALL_VIEWER_EXCEPT_HOST_HEADER,
            ),
            additional_behaviors=additional_behaviors or None,
            domain_names=[domain_name, www_domain_name],
            certificate=certificate,
            web_acl_id=waf_arn,
        )

        # --- Route53 aliases to CloudFront ---
        alias_target = route53.RecordTarget.from_alias(
            route53_targets.CloudFrontTarget(distribution)
        )
        route53.ARecord(
            self,
            "AliasRecordCF",
            zone=hosted_zone,
            target=alias_target,
            record_name=domain_name,
        )
        route53.ARecord(
            self,
            "WwwAliasRecordCF",
            zone=hosted_zone,
            target=alias_target,
            record_name=www_domain_name,
        )

        CfnOutput(
            self,
            "DistributionDomainName",
            value=distribution.distribution_domain_name,
            description="CloudFront distribution domain name",
        )

        self.distribution = distribution
