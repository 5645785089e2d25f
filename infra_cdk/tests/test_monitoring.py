"""
Unit tests for the alarms, SNS topic and dashboard.
"""

from aws_cdk import assertions

from infra_cdk.monitoring.monitoring_construct import DASHBOARD_NAME

EXPECTED_ALARMS = {
    "ECS-CPU-High": ("CPUUtilization", 80, 3, "GreaterThanThreshold"),
    "ECS-Memory-High": ("MemoryUtilization", 80, 3, "GreaterThanThreshold"),
    "ALB-5XX-Errors": ("HTTPCode_Target_5XX_Count", 10, 1, "GreaterThanThreshold"),
    "ALB-High-Response-Time": ("TargetResponseTime", 2, 2, "GreaterThanThreshold"),
    "ALB-Unhealthy-Hosts": ("UnHealthyHostCount", 0, 2, "GreaterThanThreshold"),
    "Aurora-CPU-High": ("CPUUtilization", 80, 3, "GreaterThanThreshold"),
    "Aurora-Connections-High": ("DatabaseConnections", 100, 2, "GreaterThanThreshold"),
    "Aurora-Low-Freeable-Memory": ("FreeableMemory", 200_000_000, 2, "LessThanThreshold"),
}


class TestMonitoring:
    """Test the monitoring construct wired into the main stack."""

    def test_alarm_count(self, template):
        template.resource_count_is("AWS::CloudWatch::Alarm", len(EXPECTED_ALARMS))

    def test_alarm_thresholds(self, template):
        for alarm_name, (metric_name, threshold, periods, operator) in EXPECTED_ALARMS.items():
            template.has_resource_properties("AWS::CloudWatch::Alarm", {
                "AlarmName": alarm_name,
                "MetricName": metric_name,
                "Threshold": threshold,
                "EvaluationPeriods": periods,
                "ComparisonOperator": operator,
                "TreatMissingData": "notBreaching",
            })

    def test_ok_actions_only_where_recovery_matters(self, template):
        alarms = template.find_resources("AWS::CloudWatch::Alarm")
        with_ok = {
            alarm["Properties"]["AlarmName"]
            for alarm in alarms.values()
            if alarm["Properties"].get("OKActions")
        }
        assert with_ok == set(EXPECTED_ALARMS) - {"ALB-5XX-Errors", "Aurora-Connections-High"}

    def test_every_alarm_notifies_topic(self, template):
        alarms = template.find_resources("AWS::CloudWatch::Alarm")
        for alarm in alarms.values():
            assert len(alarm["Properties"]["AlarmActions"]) == 1

    def test_topic_with_email_subscription(self, template):
        template.has_resource_properties("AWS::SNS::Topic", {"TopicName": "InfraAlarmTopic"})
        template.has_resource_properties("AWS::SNS::Subscription", {
            "Protocol": "email",
            "Endpoint": "ops@example.com",
        })

    def test_dashboard(self, template):
        template.has_resource_properties("AWS::CloudWatch::Dashboard", {
            "DashboardName": DASHBOARD_NAME,
            "DashboardBody": assertions.Match.any_value(),
        })

    def test_alarms_exposed_by_name(self, infra_stack):
        assert set(infra_stack.monitoring.alarms) == set(EXPECTED_ALARMS)
