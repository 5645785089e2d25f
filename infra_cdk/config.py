"""
Configuration module for the infrastructure app.

Reads environment variables (optionally from a project-root .env file) and
provides the deployment settings shared by the app entry point and the stacks.
"""

import os
import re
from pathlib import Path
from typing import List

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    # Do not overwrite variables already exported in the shell
    load_dotenv(dotenv_path=env_path, override=False)


_DOMAIN_PATTERN = re.compile(
    r"^(?=.{1,253}$)([a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$"
)
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Config:
    """
    Configuration class that reads environment variables for the CDK app.
    """

    # Stack identifiers
    WAF_STACK_ID: str = "WafStack"
    MAIN_STACK_ID: str = "InfraCdkStack"

    # CloudFront-scoped WAF ACLs and viewer certificates only exist in us-east-1
    WAF_REGION: str = "us-east-1"

    # AWS Configuration
    AWS_ACCOUNT_ID: str = os.getenv("AWS_ACCOUNT_ID", os.getenv("CDK_DEFAULT_ACCOUNT", ""))
    AWS_REGION: str = os.getenv(
        "AWS_DEFAULT_REGION", os.getenv("CDK_DEFAULT_REGION", "ap-northeast-1")
    )

    # DNS Configuration
    DOMAIN_NAME: str = os.getenv("DOMAIN_NAME", "example.com").strip().lower()
    HOSTED_ZONE_ID: str = os.getenv("HOSTED_ZONE_ID", "").strip()

    # Monitoring Configuration
    NOTIFICATION_EMAIL: str = os.getenv("NOTIFICATION_EMAIL", "").strip()

    # Storage Configuration
    STATIC_BUCKET_NAME: str = os.getenv("STATIC_BUCKET_NAME", "").strip()

    PROJECT_TAG: str = os.getenv("PROJECT_TAG", "infra-cdk")

    @classmethod
    def errors(cls) -> List[str]:
        """
        Collect every configuration problem instead of stopping at the first one.

        Returns:
            List[str]: Human readable error messages (empty when valid).
        """
        problems = []
        if not cls.AWS_REGION:
            problems.append("AWS_DEFAULT_REGION (or CDK_DEFAULT_REGION) is required")
        if not cls.AWS_ACCOUNT_ID and not cls.HOSTED_ZONE_ID:
            # Route53 zone lookups need a concrete account
            problems.append(
                "AWS_ACCOUNT_ID (or CDK_DEFAULT_ACCOUNT) is required when HOSTED_ZONE_ID is not set"
            )
        if not _DOMAIN_PATTERN.match(cls.DOMAIN_NAME):
            problems.append(f"DOMAIN_NAME '{cls.DOMAIN_NAME}' is not a valid domain")
        if cls.NOTIFICATION_EMAIL and not _EMAIL_PATTERN.match(cls.NOTIFICATION_EMAIL):
            problems.append(
                f"NOTIFICATION_EMAIL '{cls.NOTIFICATION_EMAIL}' is not a valid e-mail address"
            )
        return problems

    @classmethod
    def validate(cls) -> None:
        """
        Validate that the configuration can produce a deployable app.

        Raises:
            ValueError: If any configuration value is missing or malformed.
        """
        problems = cls.errors()
        if problems:
            raise ValueError(f"Invalid configuration: {'; '.join(problems)}")
