"""
Aurora MySQL database construct.

Creates the Aurora MySQL cluster (writer + reader) in the isolated subnets,
a 30-day password rotation for the generated credentials, and an RDS Proxy
that pools connections from the Fargate tasks and the bastion host.
"""

from aws_cdk import (
    CfnOutput,
    Duration,
    RemovalPolicy,
    aws_ec2 as ec2,
    aws_iam as iam,
    aws_rds as rds,
)
from constructs import Construct

DB_USERNAME = "sysadmin"
DB_NAME = "mydatabase"


class DatabaseConstruct(Construct):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.IVpc,
        subnets: ec2.SubnetSelection,
        rds_sg: ec2.ISecurityGroup,
    ) -> None:
        super().__init__(scope, construct_id)

        subnet_group = rds.SubnetGroup(
            self,
            "RDSSubnetGroup",
            description="Subnet group for Aurora cluster",
            vpc=vpc,
            subnet_group_name="RDSSubnetGroup",
            vpc_subnets=subnets,
        )

        instance_type = ec2.InstanceType.of(
            ec2.InstanceClass.BURSTABLE3, ec2.InstanceSize.MEDIUM
        )

        # Credentials are generated and stored in Secrets Manager
        aurora_cluster = rds.DatabaseCluster(
            self,
            "MyAuroraCluster",
            engine=rds.DatabaseClusterEngine.aurora_mysql(
                version=rds.AuroraMysqlEngineVersion.VER_3_04_0
            ),
            credentials=rds.Credentials.from_generated_secret(DB_USERNAME),
            writer=rds.ClusterInstance.provisioned(
                "writer",
                instance_type=instance_type,
                publicly_accessible=False,
            ),
            readers=[
                rds.ClusterInstance.provisioned(
                    "reader",
                    instance_type=instance_type,
                    publicly_accessible=False,
                )
            ],
            vpc=vpc,
            vpc_subnets=subnets,
            security_groups=[rds_sg],
            subnet_group=subnet_group,
            default_database_name=DB_NAME,
            removal_policy=RemovalPolicy.DESTROY,  # For development - change to SNAPSHOT for production
        )

        aurora_cluster.add_rotation_single_user(
            automatically_after=Duration.days(30),
            vpc_subnets=subnets,
        )

        # Proxy role may only read the cluster secret
        proxy_role = iam.Role(
            self,
            "RDSProxyRole",
            assumed_by=iam.ServicePrincipal("rds.amazonaws.com"),
        )
        aurora_cluster.secret.grant_read(proxy_role)

        rds_proxy = rds.DatabaseProxy(
            self,
            "RDSProxy",
            proxy_target=rds.ProxyTarget.from_cluster(aurora_cluster),
            secrets=[aurora_cluster.secret],
            vpc=vpc,
            vpc_subnets=subnets,
            security_groups=[rds_sg],
            role=proxy_role,
            idle_client_timeout=Duration.seconds(300),
            require_tls=True,
            debug_logging=False,  # Only enable while troubleshooting, it is billed as CloudWatch Logs
        )

        # Outputs
        CfnOutput(
            self,
            "RDSProxyEndpoint",
            value=rds_proxy.endpoint,
            description="RDS Proxy endpoint - use in app config instead of the Aurora endpoint",
            export_name="RDSProxyEndpoint",
        )

        self.aurora_cluster = aurora_cluster
        self.rds_proxy = rds_proxy
        self.proxy_role = proxy_role
