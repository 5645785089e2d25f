"""
Application Load Balancer construct.

Creates the ALB with its ACM certificate, an HTTP -> HTTPS redirect listener,
an HTTPS listener that only forwards requests carrying the CloudFront
origin-verification header, and a regional WAF web ACL.
"""

from aws_cdk import (
    aws_certificatemanager as acm,
    aws_ec2 as ec2,
    aws_elasticloadbalancingv2 as elbv2,
    aws_route53 as route53,
    aws_route53_targets as route53_targets,
    aws_s3 as s3,
    aws_secretsmanager as secretsmanager,
    aws_wafv2 as wafv2,
)
from constructs import Construct

from infra_cdk.waf.rules import managed_rule_group, visibility_config

CUSTOM_HEADER_NAME = "X-Origin-Verify"
ORIGIN_SUBDOMAIN = "origin"


class LoadBalancerConstruct(Construct):
    """
    ALB fronted by CloudFront.

    CloudFront adds a shared secret header to every origin request; the HTTPS
    listener answers 403 to anything without it, so the ALB cannot be used
    directly from the internet.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.IVpc,
        subnets: ec2.SubnetSelection,
        alb_sg: ec2.ISecurityGroup,
        alb_log_bucket: s3.IBucket,
        target_group: elbv2.IApplicationTargetGroup,
        hosted_zone: route53.IHostedZone,
        domain_name: str,
    ) -> None:
        """
        Initialize the load balancer construct.

        Args:
            scope (Construct): CDK construct scope.
            construct_id (str): Unique identifier for the construct.
            vpc (ec2.IVpc): VPC hosting the ALB.
            subnets (ec2.SubnetSelection): Public subnets for the ALB.
            alb_sg (ec2.ISecurityGroup): Security group for the ALB.
            alb_log_bucket (s3.IBucket): Bucket receiving access logs.
            target_group (elbv2.IApplicationTargetGroup): ECS service target group.
            hosted_zone (route53.IHostedZone): Zone used for DNS validation and records.
            domain_name (str): Apex domain served by the application.
        """
        super().__init__(scope, construct_id)

        origin_domain_name = f"{ORIGIN_SUBDOMAIN}.{domain_name}"

        # --- ACM certificate (DNS validation through Route53) ---
        certificate = acm.Certificate(
            self,
            "SiteCertificate",
            domain_name=domain_name,
            subject_alternative_names=[f"www.{domain_name}", origin_domain_name],
            validation=acm.CertificateValidation.from_dns(hosted_zone),
        )

        # --- CloudFront -> ALB shared secret ---
        header_secret = secretsmanager.Secret(
            self,
            "HeaderSecret",
            description="Origin verification header value shared by CloudFront and the ALB",
            generate_secret_string=secretsmanager.SecretStringGenerator(
                exclude_punctuation=True,
                include_space=False,
                password_length=64,
            ),
        )
        # TODO: unsafe_unwrap() writes the secret into the template in plaintext;
        # switch to a header rotated by a Lambda that updates both CloudFront and the listener rule.
        custom_header_value = header_secret.secret_value.unsafe_unwrap()

        alb = elbv2.ApplicationLoadBalancer(
            self,
            "MyALB",
            vpc=vpc,
            internet_facing=True,
            load_balancer_name="MyALB",
            security_group=alb_sg,
            vpc_subnets=subnets,
        )
        alb.log_access_logs(alb_log_bucket)

        # Ports 80/443 are already opened on alb_sg, so listeners are not "open"
        alb.add_listener(
            "HttpListener",
            port=80,
            open=False,
            default_action=elbv2.ListenerAction.redirect(
                protocol="HTTPS",
                port="443",
                permanent=True,
            ),
        )

        https_listener = alb.add_listener(
            "HttpsListener",
            port=443,
            certificates=[elbv2.ListenerCertificate.from_certificate_manager(certificate)],
            open=False,
            default_action=elbv2.ListenerAction.fixed_response(
                403,
                content_type="text/plain",
                message_body="Access Denied",
            ),
        )

        # Forward only when the secret header from CloudFront is present
        https_listener.add_target_groups(
            "AppTarget",
            target_groups=[target_group],
            priority=1,
            conditions=[
                elbv2.ListenerCondition.http_header(
                    CUSTOM_HEADER_NAME, [custom_header_value]
                )
            ],
        )

        # HTTPS host name for CloudFront that matches the certificate
        route53.ARecord(
            self,
            "OriginAliasRecord",
            zone=hosted_zone,
            record_name=origin_domain_name,
            target=route53.RecordTarget.from_alias(
                route53_targets.LoadBalancerTarget(alb)
            ),
        )

        # --- Regional WAF on the ALB ---
        web_acl = wafv2.CfnWebACL(
            self,
            "WebACL",
            default_action=wafv2.CfnWebACL.DefaultActionProperty(
                allow=wafv2.CfnWebACL.AllowActionProperty()
            ),
            scope="REGIONAL",
            visibility_config=visibility_config("WebACLMetric"),
            rules=[
                managed_rule_group(
                    "AWSManagedRulesCommonRuleSet",
                    1,
                    "AWSManagedRulesCommonRuleSetMetric",
                    rule_name="AWS-AWSManagedRulesCommonRuleSet",
                ),
                managed_rule_group(
                    "AWSManagedRulesKnownBadInputsRuleSet",
                    2,
                    "AWSManagedRulesKnownBadInputsRuleSetMetric",
                    rule_name="AWS-AWSManagedRulesKnownBadInputsRuleSet",
                ),
                managed_rule_group(
                    "AWSManagedRulesAmazonIpReputationList",
                    3,
                    "AWSManagedRulesAmazonIpReputationListMetric",
                    rule_name="AWS-AWSManagedRulesAmazonIpReputationList",
                ),
            ],
        )

        wafv2.CfnWebACLAssociation(
            self,
            "WebACLAssociation",
            resource_arn=alb.load_balancer_arn,
            web_acl_arn=web_acl.attr_arn,
        )

        # Store references for other constructs
        self.alb = alb
        self.certificate = certificate
        self.https_listener = https_listener
        self.custom_header_name = CUSTOM_HEADER_NAME
        self.custom_header_value = custom_header_value
        self.origin_domain_name = origin_domain_name
        self.web_acl = web_acl
