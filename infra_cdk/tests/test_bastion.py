"""
Unit tests for the SSM bastion host.
"""

from aws_cdk import assertions


class TestBastion:
    """Test the bastion instance and its locked-down security group."""

    def test_instance(self, template):
        template.has_resource_properties("AWS::EC2::Instance", {
            "InstanceType": "t3.micro",
            "BlockDeviceMappings": [{
                "DeviceName": "/dev/xvda",
                "Ebs": assertions.Match.object_like({
                    "VolumeSize": 20,
                    "VolumeType": "gp3",
                    "Encrypted": True,
                    "DeleteOnTermination": True,
                }),
            }],
            "Tags": assertions.Match.array_with([{"Key": "Name", "Value": "DBBastionHost"}]),
        })

    def test_no_inbound_rules(self, template):
        groups = template.find_resources("AWS::EC2::SecurityGroup", {
            "Properties": {
                "GroupDescription": "Security Group for DB Bastion Host - SSM only, no inbound ports required",
            },
        })
        assert len(groups) == 1
        assert "SecurityGroupIngress" not in next(iter(groups.values()))["Properties"]

    def test_ssm_managed_instance_role(self, template):
        template.has_resource_properties("AWS::IAM::Role", {
            "AssumeRolePolicyDocument": {
                "Statement": [assertions.Match.object_like({
                    "Principal": {"Service": "ec2.amazonaws.com"},
                })],
            },
        })

    def test_instance_id_output(self, template):
        outputs = template.find_outputs("*", {"Export": {"Name": "BastionInstanceId"}})
        assert len(outputs) == 1

    def test_bastion_in_first_public_subnet(self, infra_stack, template):
        subnet_ref = infra_stack.resolve(infra_stack.networking.public_subnet_1.subnet_id)
        template.has_resource_properties("AWS::EC2::Instance", {
            "SubnetId": subnet_ref,
        })
