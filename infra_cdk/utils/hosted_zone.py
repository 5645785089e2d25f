"""
Route53 hosted zone resolution shared by the WAF and main stacks.
"""

from typing import Optional

from aws_cdk import aws_route53 as route53
from constructs import Construct


def resolve_hosted_zone(
    scope: Construct, domain_name: str, hosted_zone_id: Optional[str] = None
) -> route53.IHostedZone:
    """
    Import the hosted zone for a domain.

    Uses the zone id directly when it is known, otherwise falls back to a
    context lookup by domain name (requires an explicit account and region).

    Args:
        scope (Construct): Construct the zone reference is created in.
        domain_name (str): Apex domain of the zone.
        hosted_zone_id (Optional[str]): Known zone id, skips the lookup.

    Returns:
        route53.IHostedZone: The imported hosted zone.
    """
    if hosted_zone_id:
        return route53.HostedZone.from_hosted_zone_attributes(
            scope,
            "HostedZone",
            hosted_zone_id=hosted_zone_id,
            zone_name=domain_name,
        )
    return route53.HostedZone.from_lookup(scope, "HostedZone", domain_name=domain_name)
