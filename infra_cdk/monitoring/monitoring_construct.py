"""
Monitoring and alerting construct.

Creates:
- SNS topic for alarm notifications (optional e-mail subscriber)
- 8 CloudWatch alarms: ECS (CPU, memory), ALB (5XX, response time,
  unhealthy hosts), Aurora (CPU, connections, freeable memory)
- CloudWatch dashboard with one row per tier
"""

from typing import Dict, List, Optional

from aws_cdk import (
    CfnOutput,
    Duration,
    Stack,
    aws_cloudwatch as cloudwatch,
    aws_cloudwatch_actions as cw_actions,
    aws_ecs as ecs,
    aws_elasticloadbalancingv2 as elbv2,
    aws_rds as rds,
    aws_sns as sns,
    aws_sns_subscriptions as subscriptions,
)
from constructs import Construct

DASHBOARD_NAME = "InfraOverview"


class MonitoringConstruct(Construct):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        fargate_service: ecs.FargateService,
        target_group: elbv2.ApplicationTargetGroup,
        aurora_cluster: rds.DatabaseCluster,
        notification_email: Optional[str] = None,
    ) -> None:
        """
        Initialize the monitoring construct.

        Args:
            scope (Construct): CDK construct scope.
            construct_id (str): Unique identifier for the construct.
            fargate_service (ecs.FargateService): Service whose CPU/memory is watched.
            target_group (elbv2.ApplicationTargetGroup): Target group attached to the ALB.
            aurora_cluster (rds.DatabaseCluster): Cluster whose CPU, connections and memory are watched.
            notification_email (Optional[str]): Address subscribed to the alarm topic.
                The topic is created without subscribers when empty.
        """
        super().__init__(scope, construct_id)

        alarm_topic = sns.Topic(
            self,
            "AlarmTopic",
            topic_name="InfraAlarmTopic",
            display_name="Infrastructure CloudWatch Alarms",
        )
        if notification_email:
            # AWS sends a confirmation e-mail after deploy that must be accepted
            alarm_topic.add_subscription(subscriptions.EmailSubscription(notification_email))

        self._alarm_action = cw_actions.SnsAction(alarm_topic)
        self.alarms: Dict[str, cloudwatch.Alarm] = {}

        # --- Metrics ---
        five_minutes = Duration.minutes(5)
        ecs_dimensions = {
            "ClusterName": fargate_service.cluster.cluster_name,
            "ServiceName": fargate_service.service_name,
        }
        rds_dimensions = {"DBClusterIdentifier": aurora_cluster.cluster_identifier}

        ecs_cpu = cloudwatch.Metric(
            namespace="AWS/ECS",
            metric_name="CPUUtilization",
            dimensions_map=ecs_dimensions,
            period=five_minutes,
            statistic="Average",
            label="CPU Utilization (avg)",
        )
        ecs_memory = cloudwatch.Metric(
            namespace="AWS/ECS",
            metric_name="MemoryUtilization",
            dimensions_map=ecs_dimensions,
            period=five_minutes,
            statistic="Average",
            label="Memory Utilization (avg)",
        )
        rds_cpu = cloudwatch.Metric(
            namespace="AWS/RDS",
            metric_name="CPUUtilization",
            dimensions_map=rds_dimensions,
            period=five_minutes,
            statistic="Average",
            label="Aurora CPU (avg)",
        )
        rds_connections = cloudwatch.Metric(
            namespace="AWS/RDS",
            metric_name="DatabaseConnections",
            dimensions_map=rds_dimensions,
            period=five_minutes,
            statistic="Maximum",
            label="DB Connections (max)",
        )
        rds_free_memory = cloudwatch.Metric(
            namespace="AWS/RDS",
            metric_name="FreeableMemory",
            dimensions_map=rds_dimensions,
            period=five_minutes,
            statistic="Minimum",
            label="Freeable Memory (min bytes)",
        )

        tg_metrics = target_group.metrics
        alb_5xx = tg_metrics.http_code_target(
            elbv2.HttpCodeTarget.TARGET_5XX_COUNT,
            period=five_minutes,
            statistic="Sum",
            label="5XX Count",
        )
        alb_4xx = tg_metrics.http_code_target(
            elbv2.HttpCodeTarget.TARGET_4XX_COUNT,
            period=five_minutes,
            statistic="Sum",
            label="4XX Count",
        )
        alb_response_p99 = tg_metrics.target_response_time(
            period=five_minutes,
            statistic="p99",
            label="Response Time p99",
        )
        alb_response_p50 = tg_metrics.target_response_time(
            period=five_minutes,
            statistic="p50",
            label="Response Time p50",
        )
        alb_unhealthy_hosts = tg_metrics.unhealthy_host_count(
            period=Duration.minutes(1),
            statistic="Maximum",
            label="Unhealthy Hosts",
        )

        greater = cloudwatch.ComparisonOperator.GREATER_THAN_THRESHOLD

        # --- Alarms ---
        ecs_cpu_alarm = self._create_alarm(
            "EcsCpuHighAlarm",
            alarm_name="ECS-CPU-High",
            description="ECS CPU > 80% for 15 minutes - scale up or optimize the application",
            metric=ecs_cpu,
            threshold=80,
            evaluation_periods=3,  # 3 x 5 min
            comparison_operator=greater,
            notify_ok=True,
        )
        ecs_memory_alarm = self._create_alarm(
            "EcsMemoryHighAlarm",
            alarm_name="ECS-Memory-High",
            description="ECS Memory > 80% for 15 minutes - raise task memory or investigate a leak",
            metric=ecs_memory,
            threshold=80,
            evaluation_periods=3,
            comparison_operator=greater,
            notify_ok=True,
        )
        alb_5xx_alarm = self._create_alarm(
            "Alb5xxAlarm",
            alarm_name="ALB-5XX-Errors",
            description="More than 10 target 5XX responses in 5 minutes - the application is failing",
            metric=alb_5xx,
            threshold=10,
            evaluation_periods=1,
            comparison_operator=greater,
            notify_ok=False,
        )
        alb_response_time_alarm = self._create_alarm(
            "AlbResponseTimeAlarm",
            alarm_name="ALB-High-Response-Time",
            description="Target p99 response time > 2s for 10 minutes - bottleneck in the app or database",
            metric=alb_response_p99,
            threshold=2,
            evaluation_periods=2,  # 2 x 5 min
            comparison_operator=greater,
            notify_ok=True,
        )
        self._create_alarm(
            "AlbUnhealthyHostAlarm",
            alarm_name="ALB-Unhealthy-Hosts",
            description="Unhealthy targets for 2 consecutive minutes - ECS tasks are crashing",
            metric=alb_unhealthy_hosts,
            threshold=0,
            evaluation_periods=2,  # 2 x 1 min
            comparison_operator=greater,
            notify_ok=True,
        )
        rds_cpu_alarm = self._create_alarm(
            "RdsCpuHighAlarm",
            alarm_name="Aurora-CPU-High",
            description="Aurora CPU > 80% for 15 minutes - upgrade the instance or add a reader",
            metric=rds_cpu,
            threshold=80,
            evaluation_periods=3,
            comparison_operator=greater,
            notify_ok=True,
        )
        rds_connections_alarm = self._create_alarm(
            "RdsConnectionsHighAlarm",
            alarm_name="Aurora-Connections-High",
            description="Aurora DatabaseConnections > 100 - review connection pooling",
            metric=rds_connections,
            threshold=100,
            evaluation_periods=2,
            comparison_operator=greater,
            notify_ok=False,
        )
        rds_free_memory_alarm = self._create_alarm(
            "RdsFreeMemoryLowAlarm",
            alarm_name="Aurora-Low-Freeable-Memory",
            description="Aurora FreeableMemory < 200 MB - risk of OOM, upgrade the instance",
            metric=rds_free_memory,
            threshold=200_000_000,  # bytes
            evaluation_periods=2,
            comparison_operator=cloudwatch.ComparisonOperator.LESS_THAN_THRESHOLD,
            notify_ok=True,
        )

        # --- Dashboard ---
        dashboard = cloudwatch.Dashboard(
            self,
            "InfraDashboard",
            dashboard_name=DASHBOARD_NAME,
            default_interval=Duration.hours(3),
        )
        dashboard.add_widgets(_section_header("ECS Fargate"))
        dashboard.add_widgets(
            _graph("ECS CPU Utilization (%)", [ecs_cpu], ecs_cpu_alarm, width=12),
            _graph("ECS Memory Utilization (%)", [ecs_memory], ecs_memory_alarm, width=12),
        )
        dashboard.add_widgets(_section_header("Application Load Balancer"))
        dashboard.add_widgets(
            _graph("ALB HTTP Error Counts (5min sum)", [alb_5xx, alb_4xx], alb_5xx_alarm, width=12),
            _graph(
                "ALB Target Response Time (s)",
                [alb_response_p99, alb_response_p50],
                alb_response_time_alarm,
                width=12,
            ),
        )
        dashboard.add_widgets(_section_header("Aurora MySQL"))
        dashboard.add_widgets(
            _graph("Aurora CPU Utilization (%)", [rds_cpu], rds_cpu_alarm, width=8),
            _graph("Aurora Database Connections", [rds_connections], rds_connections_alarm, width=8),
            _graph("Aurora Freeable Memory (bytes)", [rds_free_memory], rds_free_memory_alarm, width=8),
        )

        CfnOutput(
            self,
            "DashboardUrl",
            value=(
                f"https://{Stack.of(self).region}.console.aws.amazon.com/cloudwatch/home"
                f"#dashboards:name={DASHBOARD_NAME}"
            ),
            description="CloudWatch dashboard with an overview of the whole system",
        )

        self.alarm_topic = alarm_topic
        self.dashboard = dashboard

    def _create_alarm(
        self,
        alarm_id: str,
        *,
        alarm_name: str,
        description: str,
        metric: cloudwatch.IMetric,
        threshold: float,
        evaluation_periods: int,
        comparison_operator: cloudwatch.ComparisonOperator,
        notify_ok: bool,
    ) -> cloudwatch.Alarm:
        """Create an alarm that notifies the SNS topic, and optionally on recovery."""
        alarm = cloudwatch.Alarm(
            self,
            alarm_id,
            alarm_name=alarm_name,
            alarm_description=description,
            metric=metric,
            threshold=threshold,
            evaluation_periods=evaluation_periods,
            comparison_operator=comparison_operator,
            treat_missing_data=cloudwatch.TreatMissingData.NOT_BREACHING,
        )
        alarm.add_alarm_action(self._alarm_action)
        if notify_ok:
            alarm.add_ok_action(self._alarm_action)
        self.alarms[alarm_name] = alarm
        return alarm


def _section_header(title: str) -> cloudwatch.TextWidget:
    return cloudwatch.TextWidget(markdown=f"# {title}", width=24, height=1)


def _graph(
    title: str,
    metrics: List[cloudwatch.IMetric],
    alarm: cloudwatch.Alarm,
    width: int,
) -> cloudwatch.GraphWidget:
    return cloudwatch.GraphWidget(
        title=title,
        left=metrics,
        left_annotations=[alarm.to_annotation()],
        width=width,
        height=6,
    )
