"""
Security groups for the ALB, the ECS Fargate tasks, and the Aurora cluster.

Keeps every inbound rule between tiers in one place:
Internet -> ALB (80/443) -> ECS (80) -> RDS Proxy / Aurora (3306).
"""

from aws_cdk import aws_ec2 as ec2
from constructs import Construct

MYSQL_PORT = 3306


class SecurityGroupsConstruct(Construct):
    def __init__(self, scope: Construct, construct_id: str, vpc: ec2.IVpc) -> None:
        super().__init__(scope, construct_id)

        # --- ALB: HTTP and HTTPS from the internet ---
        alb_sg = ec2.SecurityGroup(
            self,
            "ALBSecurityGroup",
            vpc=vpc,
            description="Security group for Application Load Balancer",
            allow_all_outbound=True,
        )
        alb_sg.add_ingress_rule(
            peer=ec2.Peer.any_ipv4(),
            connection=ec2.Port.tcp(80),
            description="Allow HTTP from anywhere",
        )
        alb_sg.add_ingress_rule(
            peer=ec2.Peer.any_ipv4(),
            connection=ec2.Port.tcp(443),
            description="Allow HTTPS from anywhere",
        )

        # --- ECS: only from the ALB ---
        ecs_sg = ec2.SecurityGroup(
            self,
            "ECSSecurityGroup",
            vpc=vpc,
            description="Security group for ECS Fargate tasks",
            allow_all_outbound=True,
        )
        ecs_sg.add_ingress_rule(
            peer=alb_sg,
            connection=ec2.Port.tcp(80),
            description="Allow HTTP from ALB only",
        )

        # --- RDS: only MySQL from the ECS tasks ---
        rds_sg = ec2.SecurityGroup(
            self,
            "RDSSecurityGroup",
            vpc=vpc,
            description="Security group for RDS Aurora cluster",
            allow_all_outbound=True,
        )
        rds_sg.add_ingress_rule(
            peer=ecs_sg,
            connection=ec2.Port.tcp(MYSQL_PORT),
            description="Allow MySQL from ECS tasks only",
        )
        # RDS Proxy shares this group and must reach the cluster instances
        rds_sg.add_ingress_rule(
            peer=rds_sg,
            connection=ec2.Port.tcp(MYSQL_PORT),
            description="Allow MySQL from RDS Proxy",
        )

        self.alb_sg = alb_sg
        self.ecs_sg = ecs_sg
        self.rds_sg = rds_sg
