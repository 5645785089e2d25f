"""
Bastion host for reaching Aurora from a workstation.

Connection path (no SSH, no inbound ports):
    local machine -> AWS SSM -> EC2 bastion -> RDS Proxy -> Aurora

The host sits in a public subnet so the SSM agent reaches SSM through the
internet gateway without extra VPC endpoints. A t3.micro bills hourly; stop
it when unused (`infra-db-tunnel stop`).
"""

from aws_cdk import (
    CfnOutput,
    aws_ec2 as ec2,
)
from constructs import Construct


class BastionConstruct(Construct):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.IVpc,
        public_subnet: ec2.ISubnet,
    ) -> None:
        super().__init__(scope, construct_id)

        # No inbound rules: SSM sessions are outbound HTTPS from the agent
        security_group = ec2.SecurityGroup(
            self,
            "BastionSG",
            vpc=vpc,
            description="Security Group for DB Bastion Host - SSM only, no inbound ports required",
            allow_all_outbound=True,
        )

        # BastionHostLinux creates the instance role with SSM permissions
        host = ec2.BastionHostLinux(
            self,
            "BastionHost",
            vpc=vpc,
            subnet_selection=ec2.SubnetSelection(subnets=[public_subnet]),
            instance_name="DBBastionHost",
            instance_type=ec2.InstanceType.of(ec2.InstanceClass.T3, ec2.InstanceSize.MICRO),
            machine_image=ec2.MachineImage.latest_amazon_linux2023(),
            security_group=security_group,
            block_devices=[
                ec2.BlockDevice(
                    device_name="/dev/xvda",
                    volume=ec2.BlockDeviceVolume.ebs(
                        20,
                        volume_type=ec2.EbsDeviceVolumeType.GP3,
                        encrypted=True,
                        delete_on_termination=True,
                    ),
                )
            ],
        )

        CfnOutput(
            self,
            "BastionInstanceId",
            value=host.instance_id,
            description="Bastion Host Instance ID - used by: aws ssm start-session --target <ID>",
            export_name="BastionInstanceId",
        )

        self.host = host
        self.security_group = security_group
