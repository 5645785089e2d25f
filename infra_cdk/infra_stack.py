"""
Main infrastructure stack.

Architecture:
    Internet -> [WAF, CloudFront edge] -> CloudFront -> ALB (public subnets)
             -> ECS Fargate (private subnets) -> RDS Proxy -> Aurora (private subnets)

Database access from a workstation:
    local machine -> SSM -> bastion host (public subnet) -> RDS Proxy -> Aurora

The CloudFront web ACL lives in WafStack (us-east-1); its ARN arrives here
through CDK cross-region references.
"""

from typing import Optional

from aws_cdk import (
    Stack,
    Tags,
    aws_certificatemanager as acm,
    aws_ec2 as ec2,
)
from constructs import Construct

from infra_cdk.bastion.bastion_construct import BastionConstruct
from infra_cdk.cloudfront.cloudfront_construct import CloudFrontConstruct
from infra_cdk.config import Config
from infra_cdk.database.database_construct import DatabaseConstruct
from infra_cdk.ecs.ecs_construct import EcsConstruct
from infra_cdk.load_balancer.load_balancer_construct import LoadBalancerConstruct
from infra_cdk.monitoring.monitoring_construct import MonitoringConstruct
from infra_cdk.networking.networking_construct import NetworkingConstruct
from infra_cdk.security.security_groups_construct import (
    MYSQL_PORT,
    SecurityGroupsConstruct,
)
from infra_cdk.storage.storage_construct import StorageConstruct
from infra_cdk.utils.hosted_zone import resolve_hosted_zone


class InfraCdkStack(Stack):
    """
    Entry point of the application infrastructure.

    Each tier is a separate construct:
    1. NetworkingConstruct     - VPC, subnets, IGW, route tables, VPC endpoints
    2. SecurityGroupsConstruct - ALB / ECS / RDS security groups
    3. StorageConstruct        - S3 buckets (ALB logs, static assets)
    4. EcsConstruct            - cluster, Fargate service, target group, auto scaling
    5. DatabaseConstruct       - Aurora MySQL, RDS Proxy, password rotation
    6. LoadBalancerConstruct   - ALB, ACM certificate, listeners, regional WAF
    7. CloudFrontConstruct     - distribution + CloudFront WAF, Route53 aliases
    8. BastionConstruct        - EC2 bastion for SSM port forwarding to the database
    9. MonitoringConstruct     - SNS alarms and the CloudWatch dashboard
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        domain_name: str = "example.com",
        hosted_zone_id: Optional[str] = None,
        waf_arn: Optional[str] = None,
        cloudfront_certificate: Optional[acm.ICertificate] = None,
        notification_email: Optional[str] = None,
        static_bucket_name: Optional[str] = None,
        **kwargs,
    ) -> None:
        """
        Initialize the main stack.

        Args:
            scope (Construct): CDK construct scope.
            construct_id (str): Unique identifier for the stack.
            domain_name (str): Apex domain; its hosted zone must already exist.
            hosted_zone_id (Optional[str]): Zone id, avoids a context lookup when set.
            waf_arn (Optional[str]): CLOUDFRONT web ACL ARN from WafStack.
            cloudfront_certificate (Optional[acm.ICertificate]): us-east-1 viewer
                certificate from WafStack. The ALB certificate is used when absent,
                which only works when this stack is itself in us-east-1.
            notification_email (Optional[str]): Alarm subscriber; falls back to the
                `notificationEmail` context value.
            static_bucket_name (Optional[str]): Explicit name for the static bucket.
            **kwargs: Additional CDK Stack kwargs such as env.
        """
        super().__init__(scope, construct_id, **kwargs)

        Tags.of(self).add("project", Config.PROJECT_TAG)

        notification_email = notification_email or self.node.try_get_context(
            "notificationEmail"
        )

        # 1. Networking
        networking = NetworkingConstruct(self, "Networking")
        vpc = networking.vpc

        # 2. Security groups
        security_groups = SecurityGroupsConstruct(self, "SecurityGroups", vpc)

        # 3. Storage
        storage = StorageConstruct(self, "Storage", static_bucket_name=static_bucket_name)

        # 4. ECS
        ecs_construct = EcsConstruct(
            self,
            "Ecs",
            vpc=vpc,
            subnets=networking.private_subnets,
            ecs_sg=security_groups.ecs_sg,
        )

        # 5. Database
        database = DatabaseConstruct(
            self,
            "Database",
            vpc=vpc,
            subnets=networking.private_subnets,
            rds_sg=security_groups.rds_sg,
        )

        # 6. Route53 hosted zone
        hosted_zone = resolve_hosted_zone(self, domain_name, hosted_zone_id)

        # 7. Load balancer
        load_balancer = LoadBalancerConstruct(
            self,
            "LoadBalancer",
            vpc=vpc,
            subnets=networking.public_subnets,
            alb_sg=security_groups.alb_sg,
            alb_log_bucket=storage.alb_log_bucket,
            target_group=ecs_construct.target_group,
            hosted_zone=hosted_zone,
            domain_name=domain_name,
        )

        # 8. CloudFront + WAF from WafStack
        cloudfront_construct = CloudFrontConstruct(
            self,
            "CloudFront",
            origin_domain_name=load_balancer.origin_domain_name,
            certificate=cloudfront_certificate or load_balancer.certificate,
            domain_name=domain_name,
            hosted_zone=hosted_zone,
            custom_header_name=load_balancer.custom_header_name,
            custom_header_value=load_balancer.custom_header_value,
            static_bucket=storage.static_bucket,
            waf_arn=waf_arn,
        )

        # 9. Bastion host
        bastion = BastionConstruct(
            self,
            "Bastion",
            vpc=vpc,
            public_subnet=networking.public_subnet_1,
        )
        security_groups.rds_sg.add_ingress_rule(
            peer=bastion.security_group,
            connection=ec2.Port.tcp(MYSQL_PORT),
            description="Allow MySQL from Bastion Host (SSM Port Forwarding)",
        )

        # 10. Monitoring
        monitoring = MonitoringConstruct(
            self,
            "Monitoring",
            fargate_service=ecs_construct.fargate_service,
            target_group=ecs_construct.target_group,
            aurora_cluster=database.aurora_cluster,
            notification_email=notification_email,
        )

        # Store references
        self.networking = networking
        self.security_groups = security_groups
        self.storage = storage
        self.ecs = ecs_construct
        self.database = database
        self.load_balancer = load_balancer
        self.cloudfront = cloudfront_construct
        self.bastion = bastion
        self.monitoring = monitoring
