"""
Networking construct for the whole application.

Creates the VPC, public and isolated private subnets, the internet gateway,
and the VPC endpoints that replace a NAT gateway for the private subnets
(ECR, CloudWatch Logs, Secrets Manager, S3).
"""

from aws_cdk import aws_ec2 as ec2
from constructs import Construct

VPC_CIDR = "10.0.0.0/16"
PUBLIC_SUBNET_CIDRS = ("10.0.1.0/24", "10.0.2.0/24")
PRIVATE_SUBNET_CIDRS = ("10.0.11.0/24", "10.0.12.0/24")


class NetworkingConstruct(Construct):
    def __init__(self, scope: Construct, construct_id: str) -> None:
        super().__init__(scope, construct_id)

        # Subnets are declared explicitly below so the CIDR layout is fixed
        vpc = ec2.Vpc(
            self,
            "MyVPC",
            ip_addresses=ec2.IpAddresses.cidr(VPC_CIDR),
            max_azs=2,
            subnet_configuration=[],
            nat_gateways=0,
        )
        azs = vpc.availability_zones

        # --- Public subnets ---
        public_subnet_1 = ec2.PublicSubnet(
            self,
            "PublicSubnet1",
            vpc_id=vpc.vpc_id,
            availability_zone=azs[0],
            cidr_block=PUBLIC_SUBNET_CIDRS[0],
            map_public_ip_on_launch=True,
        )
        public_subnet_2 = ec2.PublicSubnet(
            self,
            "PublicSubnet2",
            vpc_id=vpc.vpc_id,
            availability_zone=azs[1],
            cidr_block=PUBLIC_SUBNET_CIDRS[1],
            map_public_ip_on_launch=True,
        )

        # --- Internet gateway and default routes for the public subnets ---
        igw = ec2.CfnInternetGateway(self, "MyIGW")
        igw_attachment = ec2.CfnVPCGatewayAttachment(
            self,
            "IGWAttachment",
            vpc_id=vpc.vpc_id,
            internet_gateway_id=igw.ref,
        )
        for subnet in (public_subnet_1, public_subnet_2):
            subnet.add_default_internet_route(igw.ref, igw_attachment)

        # --- Private subnets (isolated, no 0.0.0.0/0 route) ---
        private_subnet_1 = ec2.PrivateSubnet(
            self,
            "PrivateSubnet1",
            vpc_id=vpc.vpc_id,
            availability_zone=azs[0],
            cidr_block=PRIVATE_SUBNET_CIDRS[0],
            map_public_ip_on_launch=False,
        )
        private_subnet_2 = ec2.PrivateSubnet(
            self,
            "PrivateSubnet2",
            vpc_id=vpc.vpc_id,
            availability_zone=azs[1],
            cidr_block=PRIVATE_SUBNET_CIDRS[1],
            map_public_ip_on_launch=False,
        )

        public_subnets = ec2.SubnetSelection(subnets=[public_subnet_1, public_subnet_2])
        private_subnets = ec2.SubnetSelection(
            subnets=[private_subnet_1, private_subnet_2]
        )

        # --- VPC endpoints (no NAT gateway) ---
        endpoint_sg = ec2.SecurityGroup(
            self,
            "VpcEndpointSG",
            vpc=vpc,
            description="Security Group for VPC Endpoints",
            allow_all_outbound=True,
        )
        endpoint_sg.add_ingress_rule(
            peer=ec2.Peer.ipv4(vpc.vpc_cidr_block),
            connection=ec2.Port.tcp(443),
            description="Allow HTTPS from within VPC",
        )

        # Fargate pulls images and writes logs through these
        interface_endpoints = {
            "EcrDockerEndpoint": ec2.InterfaceVpcEndpointAwsService.ECR_DOCKER,
            "EcrApiEndpoint": ec2.InterfaceVpcEndpointAwsService.ECR,
            "LogsEndpoint": ec2.InterfaceVpcEndpointAwsService.CLOUDWATCH_LOGS,
            "SecretsManagerEndpoint": ec2.InterfaceVpcEndpointAwsService.SECRETS_MANAGER,
        }
        for endpoint_id, service in interface_endpoints.items():
            vpc.add_interface_endpoint(
                endpoint_id,
                service=service,
                security_groups=[endpoint_sg],
                subnets=private_subnets,
            )

        # S3 gateway endpoint is free and also serves ECR image layers
        vpc.add_gateway_endpoint(
            "S3Endpoint",
            service=ec2.GatewayVpcEndpointAwsService.S3,
            subnets=[private_subnets],
        )

        # Store references for other constructs
        self.vpc = vpc
        self.public_subnet_1 = public_subnet_1
        self.public_subnet_2 = public_subnet_2
        self.private_subnet_1 = private_subnet_1
        self.private_subnet_2 = private_subnet_2
        self.public_subnets = public_subnets
        self.private_subnets = private_subnets
        self.endpoint_sg = endpoint_sg
