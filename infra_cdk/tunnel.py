#!/usr/bin/env python3
"""
Database tunnel helper.

Opens an SSM port-forwarding session from this machine to the RDS Proxy
through the bastion host, and starts/stops the bastion instance:

    local machine -> AWS SSM -> EC2 bastion -> RDS Proxy -> Aurora

The bastion instance id and proxy endpoint are read from the deployed
InfraCdkStack outputs (matched by export name).

Usage:
    infra-db-tunnel connect [--local-port 3306] [--dry-run]
    infra-db-tunnel start
    infra-db-tunnel stop

Requires the AWS CLI and the Session Manager plugin for `connect`.
"""

import argparse
import json
import subprocess
import sys
from typing import Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from infra_cdk.config import Config
from infra_cdk.security.security_groups_construct import MYSQL_PORT
from infra_cdk.utils.logging_utils import (
    log_error,
    log_progress,
    log_section_complete,
    log_section_start,
)

BASTION_EXPORT_NAME = "BastionInstanceId"
PROXY_EXPORT_NAME = "RDSProxyEndpoint"
PORT_FORWARD_DOCUMENT = "AWS-StartPortForwardingSessionToRemoteHost"


class DatabaseTunnel:
    """
    Helper that resolves the bastion and proxy from stack outputs and drives SSM/EC2.
    """

    def __init__(self, stack_name: str = Config.MAIN_STACK_ID, region: Optional[str] = None):
        self.stack_name = stack_name
        self.region = region or Config.AWS_REGION

        self.cloudformation_client = boto3.client("cloudformation", region_name=self.region)
        self.ec2_client = boto3.client("ec2", region_name=self.region)

        self._outputs: Optional[Dict[str, str]] = None

    def _get_stack_outputs(self) -> Dict[str, str]:
        """
        Read the stack outputs keyed by export name (falling back to output key).

        Returns:
            Dict[str, str]: Output values of the deployed stack.
        """
        if self._outputs is None:
            response = self.cloudformation_client.describe_stacks(StackName=self.stack_name)
            stacks = response.get("Stacks", [])
            if not stacks:
                raise ValueError(f"Stack {self.stack_name} not found in {self.region}")

            self._outputs = {
                output.get("ExportName") or output["OutputKey"]: output["OutputValue"]
                for output in stacks[0].get("Outputs", [])
            }
        return self._outputs

    def _require_output(self, export_name: str) -> str:
        outputs = self._get_stack_outputs()
        if export_name not in outputs:
            raise ValueError(
                f"Output '{export_name}' missing from stack {self.stack_name} - is it deployed?"
            )
        return outputs[export_name]

    @property
    def bastion_instance_id(self) -> str:
        return self._require_output(BASTION_EXPORT_NAME)

    @property
    def proxy_endpoint(self) -> str:
        return self._require_output(PROXY_EXPORT_NAME)

    def build_port_forward_command(self, local_port: int = MYSQL_PORT) -> List[str]:
        """
        Build the AWS CLI command that forwards a local port to the RDS Proxy.

        Args:
            local_port (int): Port to listen on locally.

        Returns:
            List[str]: Command arguments for subprocess.
        """
        parameters = json.dumps(
            {
                "host": [self.proxy_endpoint],
                "portNumber": [str(MYSQL_PORT)],
                "localPortNumber": [str(local_port)],
            }
        )
        return [
            "aws",
            "ssm",
            "start-session",
            "--region",
            self.region,
            "--target",
            self.bastion_instance_id,
            "--document-name",
            PORT_FORWARD_DOCUMENT,
            "--parameters",
            parameters,
        ]

    def connect(self, local_port: int = MYSQL_PORT, dry_run: bool = False) -> List[str]:
        """
        Open the port-forwarding session (blocks until the session ends).

        Args:
            local_port (int): Port to listen on locally.
            dry_run (bool): Only print the command.

        Returns:
            List[str]: The command that was (or would have been) run.
        """
        cmd = self.build_port_forward_command(local_port)
        log_section_start("Database Tunnel", f"localhost:{local_port} -> {self.proxy_endpoint}:{MYSQL_PORT}")
        if dry_run:
            log_progress("Database Tunnel", " ".join(cmd))
            log_section_complete("Database Tunnel", "Dry run, session not started")
            return cmd

        try:
            subprocess.run(cmd, check=True)
        except KeyboardInterrupt:
            # Ctrl+C is how a port-forwarding session is normally ended
            log_progress("Database Tunnel", "Session stopped by user")
        finally:
            log_section_complete("Database Tunnel", "Session closed")
        return cmd

    def start_bastion(self) -> None:
        """Start the bastion instance and wait until it is running."""
        instance_id = self.bastion_instance_id
        log_section_start("Start Bastion", instance_id)
        self.ec2_client.start_instances(InstanceIds=[instance_id])
        self.ec2_client.get_waiter("instance_running").wait(InstanceIds=[instance_id])
        log_section_complete("Start Bastion", f"{instance_id} is running")

    def stop_bastion(self) -> None:
        """Stop the bastion instance to avoid paying for idle hours."""
        instance_id = self.bastion_instance_id
        log_section_start("Stop Bastion", instance_id)
        self.ec2_client.stop_instances(InstanceIds=[instance_id])
        log_section_complete("Stop Bastion", f"Stop requested for {instance_id}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="SSM tunnel to the Aurora RDS Proxy")
    parser.add_argument(
        "--stack-name", default=Config.MAIN_STACK_ID, help="Deployed main stack name"
    )
    parser.add_argument("--region", default=None, help="Region of the main stack")
    subparsers = parser.add_subparsers(dest="command", required=True)

    connect_parser = subparsers.add_parser("connect", help="Forward a local port to the RDS Proxy")
    connect_parser.add_argument(
        "--local-port", type=int, default=MYSQL_PORT, help="Local port to listen on"
    )
    connect_parser.add_argument(
        "--dry-run", action="store_true", help="Print the AWS CLI command without running it"
    )
    subparsers.add_parser("start", help="Start the bastion instance")
    subparsers.add_parser("stop", help="Stop the bastion instance")

    args = parser.parse_args(argv)

    try:
        tunnel = DatabaseTunnel(stack_name=args.stack_name, region=args.region)
        if args.command == "connect":
            tunnel.connect(local_port=args.local_port, dry_run=args.dry_run)
        elif args.command == "start":
            tunnel.start_bastion()
        else:
            tunnel.stop_bastion()
    except (
        BotoCoreError,
        ClientError,
        ValueError,
        FileNotFoundError,
        subprocess.CalledProcessError,
    ) as e:
        log_error(f"Database Tunnel ({args.command})", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
