"""
ECS construct for the web application.

Creates the ECS cluster, the Fargate task definition and service, the ALB
target group the service registers into, the CloudWatch log group, and the
service auto scaling (CPU target tracking plus a night-time schedule).
"""

from pathlib import Path

from aws_cdk import (
    Duration,
    RemovalPolicy,
    aws_applicationautoscaling as appscaling,
    aws_ec2 as ec2,
    aws_ecs as ecs,
    aws_elasticloadbalancingv2 as elbv2,
    aws_logs as logs,
)
from constructs import Construct

# Docker build context for the application image
DOCKER_APP_DIR = Path(__file__).parent.parent.parent / "docker-app"

CONTAINER_PORT = 80
MIN_TASKS = 2
MAX_TASKS = 8


class EcsConstruct(Construct):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.IVpc,
        subnets: ec2.SubnetSelection,
        ecs_sg: ec2.ISecurityGroup,
    ) -> None:
        """
        Initialize the ECS construct.

        Args:
            scope (Construct): CDK construct scope.
            construct_id (str): Unique identifier for the construct.
            vpc (ec2.IVpc): VPC hosting the cluster.
            subnets (ec2.SubnetSelection): Private subnets for the tasks.
            ecs_sg (ec2.ISecurityGroup): Security group for the tasks.
        """
        super().__init__(scope, construct_id)

        log_group = logs.LogGroup(
            self,
            "FargateLogGroup",
            log_group_name="/ecs/fargate-service-logs",
            retention=logs.RetentionDays.ONE_WEEK,
            removal_policy=RemovalPolicy.DESTROY,
        )

        cluster = ecs.Cluster(
            self,
            "ECSCluster",
            cluster_name="ECSCluster",
            vpc=vpc,
        )

        task_definition = ecs.FargateTaskDefinition(
            self,
            "FargateTaskDef",
            cpu=256,
            memory_limit_mib=512,
        )

        # Image is built locally and pushed to the private CDK assets ECR repo
        task_definition.add_container(
            "AppContainer",
            image=ecs.ContainerImage.from_asset(str(DOCKER_APP_DIR)),
            port_mappings=[ecs.PortMapping(container_port=CONTAINER_PORT)],
            logging=ecs.LogDrivers.aws_logs(stream_prefix="fargate", log_group=log_group),
        )

        # Created here because it is tied to the service; the listener rule lives in the ALB construct
        target_group = elbv2.ApplicationTargetGroup(
            self,
            "FargateTargetGroup",
            vpc=vpc,
            port=CONTAINER_PORT,
            protocol=elbv2.ApplicationProtocol.HTTP,
            target_type=elbv2.TargetType.IP,
            health_check=elbv2.HealthCheck(path="/"),
        )

        fargate_service = ecs.FargateService(
            self,
            "FargateService",
            cluster=cluster,
            service_name="MyFargateService",
            task_definition=task_definition,
            assign_public_ip=False,
            desired_count=MIN_TASKS,
            security_groups=[ecs_sg],
            vpc_subnets=subnets,
        )
        fargate_service.attach_to_application_target_group(target_group)

        # --- Auto scaling: CPU based ---
        scaling = fargate_service.auto_scale_task_count(
            min_capacity=MIN_TASKS,
            max_capacity=MAX_TASKS,
        )
        scaling.scale_on_cpu_utilization(
            "CpuScaling",
            target_utilization_percent=50,
            scale_in_cooldown=Duration.seconds(60),
            scale_out_cooldown=Duration.seconds(60),
        )

        # --- Auto scaling: schedule (UTC) ---
        # 15:00 UTC = 22:00 UTC+7, scale to zero overnight
        scaling.scale_on_schedule(
            "ScaleDownAtNight",
            schedule=appscaling.Schedule.cron(hour="15", minute="0"),
            min_capacity=0,
            max_capacity=0,
        )
        # 00:00 UTC = 07:00 UTC+7
        scaling.scale_on_schedule(
            "ScaleUpInMorning",
            schedule=appscaling.Schedule.cron(hour="0", minute="0"),
            min_capacity=MIN_TASKS,
            max_capacity=MAX_TASKS,
        )

        # Store references for other constructs
        self.cluster = cluster
        self.task_definition = task_definition
        self.fargate_service = fargate_service
        self.target_group = target_group
        self.log_group = log_group
