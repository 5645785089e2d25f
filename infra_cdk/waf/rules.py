"""
Helpers for building WAFv2 web ACL rule properties.
"""

from typing import Optional

from aws_cdk import aws_wafv2 as wafv2


def visibility_config(metric_name: str) -> wafv2.CfnWebACL.VisibilityConfigProperty:
    """Return a visibility config with sampling and CloudWatch metrics enabled."""
    return wafv2.CfnWebACL.VisibilityConfigProperty(
        sampled_requests_enabled=True,
        cloud_watch_metrics_enabled=True,
        metric_name=metric_name,
    )


def managed_rule_group(
    name: str,
    priority: int,
    metric_name: str,
    rule_name: Optional[str] = None,
) -> wafv2.CfnWebACL.RuleProperty:
    """
    Build a rule that evaluates an AWS managed rule group.

    The override action is "none", so the group's own actions (block) apply.

    Args:
        name (str): Name of the AWS managed rule group.
        priority (int): Rule priority within the web ACL.
        metric_name (str): CloudWatch metric name for the rule.
        rule_name (Optional[str]): Rule name, defaults to the group name.

    Returns:
        wafv2.CfnWebACL.RuleProperty: The rule definition.
    """
    return wafv2.CfnWebACL.RuleProperty(
        name=rule_name or name,
        priority=priority,
        override_action=wafv2.CfnWebACL.OverrideActionProperty(none={}),
        statement=wafv2.CfnWebACL.StatementProperty(
            managed_rule_group_statement=wafv2.CfnWebACL.ManagedRuleGroupStatementProperty(
                vendor_name="AWS",
                name=name,
            ),
        ),
        visibility_config=visibility_config(metric_name),
    )
