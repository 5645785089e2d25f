"""
WAF Stack for the CloudFront distribution.

CloudFront-scoped web ACLs (and CloudFront viewer certificates) can only be
created in us-east-1, regardless of where the main stack is deployed. The
main stack receives the ARNs through CDK cross-region references, which CDK
bridges with SSM Parameter Store.
"""

from typing import Optional

from aws_cdk import (
    Stack,
    Tags,
    Token,
    CfnOutput,
    aws_certificatemanager as acm,
    aws_wafv2 as wafv2,
)
from constructs import Construct

from infra_cdk.config import Config
from infra_cdk.utils.hosted_zone import resolve_hosted_zone
from infra_cdk.waf.rules import managed_rule_group, visibility_config


class WafStack(Stack):
    """
    Stack that owns the CloudFront web ACL.

    Rules:
    1. AWS Managed - Common Rule Set (XSS, path traversal, ...)
    2. AWS Managed - IP Reputation List (bots, scanners, TOR exit nodes)
    3. AWS Managed - Known Bad Inputs (Log4Shell, SSRF, ...)
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        domain_name: Optional[str] = None,
        hosted_zone_id: Optional[str] = None,
        **kwargs,
    ) -> None:
        """
        Initialize the WAF stack.

        Args:
            scope (Construct): CDK construct scope.
            construct_id (str): Unique identifier for the stack.
            domain_name (Optional[str]): When set, also issue the CloudFront
                viewer certificate for the domain and its www host.
            hosted_zone_id (Optional[str]): Zone id used for DNS validation.
            **kwargs: Additional CDK Stack kwargs such as env.

        Raises:
            ValueError: If the stack region is known and is not us-east-1.
        """
        super().__init__(scope, construct_id, **kwargs)

        if not Token.is_unresolved(self.region) and self.region != Config.WAF_REGION:
            raise ValueError(
                f"{construct_id} must be deployed in {Config.WAF_REGION}, got {self.region}"
            )

        Tags.of(self).add("project", Config.PROJECT_TAG)

        web_acl = wafv2.CfnWebACL(
            self,
            "CloudFrontWebACL",
            default_action=wafv2.CfnWebACL.DefaultActionProperty(
                allow=wafv2.CfnWebACL.AllowActionProperty()
            ),
            scope="CLOUDFRONT",
            visibility_config=visibility_config("CloudFrontWebACLMetric"),
            rules=[
                managed_rule_group("AWSManagedRulesCommonRuleSet", 1, "CommonRuleSetMetric"),
                managed_rule_group(
                    "AWSManagedRulesAmazonIpReputationList", 2, "IpReputationMetric"
                ),
                managed_rule_group(
                    "AWSManagedRulesKnownBadInputsRuleSet", 3, "KnownBadInputsMetric"
                ),
            ],
        )

        self.web_acl = web_acl
        self.web_acl_arn = web_acl.attr_arn

        CfnOutput(
            self,
            "WebAclArn",
            value=self.web_acl_arn,
            description="ARN of the CloudFront WAF - consumed by the main stack",
            export_name="CloudFrontWebAclArn",
        )

        self.certificate = None
        if domain_name:
            hosted_zone = resolve_hosted_zone(self, domain_name, hosted_zone_id)
            self.certificate = acm.Certificate(
                self,
                "CloudFrontCertificate",
                domain_name=domain_name,
                subject_alternative_names=[f"www.{domain_name}"],
                validation=acm.CertificateValidation.from_dns(hosted_zone),
            )

            CfnOutput(
                self,
                "CloudFrontCertificateArn",
                value=self.certificate.certificate_arn,
                description="ACM certificate (us-east-1) used by the CloudFront distribution",
            )
