#!/usr/bin/env python3
"""
AWS CDK App for the application infrastructure.

Deploys two stacks:
- WafStack (always us-east-1): CloudFront web ACL and viewer certificate
- InfraCdkStack (main region): everything else, receiving the WAF ARN and
  certificate through cross-region references (SSM Parameter Store)
"""

import os
import sys

import aws_cdk as cdk

from infra_cdk.config import Config, env_path
from infra_cdk.infra_stack import InfraCdkStack
from infra_cdk.utils.logging_utils import (
    log_error,
    log_section_complete,
    log_section_start,
)
from infra_cdk.waf.waf_stack import WafStack


def build_app(app: cdk.App = None) -> cdk.App:
    """
    Create both stacks on a CDK app using the current configuration.

    Args:
        app (cdk.App): Existing app to populate, a new one is created when omitted.

    Returns:
        cdk.App: The populated app, ready to synthesize.

    Raises:
        ValueError: If the configuration is invalid.
    """
    Config.validate()
    app = app or cdk.App()

    # Fixed region: CLOUDFRONT scoped resources are only accepted in us-east-1
    waf_stack = WafStack(
        app,
        Config.WAF_STACK_ID,
        domain_name=Config.DOMAIN_NAME,
        hosted_zone_id=Config.HOSTED_ZONE_ID or None,
        env=cdk.Environment(account=Config.AWS_ACCOUNT_ID or None, region=Config.WAF_REGION),
        cross_region_references=True,
        description="WAF Stack (CLOUDFRONT scope) - must live in us-east-1",
    )

    InfraCdkStack(
        app,
        Config.MAIN_STACK_ID,
        domain_name=Config.DOMAIN_NAME,
        hosted_zone_id=Config.HOSTED_ZONE_ID or None,
        waf_arn=waf_stack.web_acl_arn,
        cloudfront_certificate=waf_stack.certificate,
        notification_email=Config.NOTIFICATION_EMAIL or None,
        static_bucket_name=Config.STATIC_BUCKET_NAME or None,
        env=cdk.Environment(account=Config.AWS_ACCOUNT_ID or None, region=Config.AWS_REGION),
        cross_region_references=True,
        description="Main infrastructure stack - ECS, ALB, Aurora, CloudFront",
    )

    return app


def main() -> None:
    """Build and synthesize the app."""
    if not env_path.exists():
        print(f"Warning: .env file not found at {env_path}", file=sys.stderr)

    log_section_start(
        "CDK synth",
        f"account={Config.AWS_ACCOUNT_ID or 'unset'} region={Config.AWS_REGION} domain={Config.DOMAIN_NAME}",
    )
    try:
        app = build_app()
    except ValueError as e:
        log_error("CDK synth", e)
        sys.exit(1)

    app.synth()
    log_section_complete("CDK synth", f"output in {os.path.abspath(app.outdir)}")


if __name__ == "__main__":
    main()
