"""
Shared fixtures: one synthesized app holding both stacks.

Stacks use a concrete account/region and a fixed hosted zone id so the
synth never needs AWS lookups.
"""

import aws_cdk as cdk
import pytest
from aws_cdk import assertions

from infra_cdk.infra_stack import InfraCdkStack
from infra_cdk.waf.waf_stack import WafStack

ACCOUNT = "123456789012"
MAIN_REGION = "ap-northeast-1"
WAF_REGION = "us-east-1"
DOMAIN_NAME = "example.com"
HOSTED_ZONE_ID = "Z0123456789ABCDEFGHIJ"
NOTIFICATION_EMAIL = "ops@example.com"


@pytest.fixture(scope="session")
def stacks():
    app = cdk.App()
    waf_stack = WafStack(
        app,
        "TestWafStack",
        domain_name=DOMAIN_NAME,
        hosted_zone_id=HOSTED_ZONE_ID,
        env=cdk.Environment(account=ACCOUNT, region=WAF_REGION),
        cross_region_references=True,
    )
    infra_stack = InfraCdkStack(
        app,
        "TestInfraStack",
        domain_name=DOMAIN_NAME,
        hosted_zone_id=HOSTED_ZONE_ID,
        waf_arn=waf_stack.web_acl_arn,
        cloudfront_certificate=waf_stack.certificate,
        notification_email=NOTIFICATION_EMAIL,
        env=cdk.Environment(account=ACCOUNT, region=MAIN_REGION),
        cross_region_references=True,
    )
    return waf_stack, infra_stack


@pytest.fixture(scope="session")
def waf_stack(stacks):
    return stacks[0]


@pytest.fixture(scope="session")
def infra_stack(stacks):
    return stacks[1]


@pytest.fixture(scope="session")
def waf_template(waf_stack):
    return assertions.Template.from_stack(waf_stack)


@pytest.fixture(scope="session")
def template(infra_stack):
    return assertions.Template.from_stack(infra_stack)
