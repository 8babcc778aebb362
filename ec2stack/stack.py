"""
Single-instance EC2 stack: key pair, VPC with one public subnet, security group
and one instance with a public IP, all created under explicit providers.
"""
import pulumi

from ec2stack.config import StackSettings
from ec2stack.ec2.ec2 import Ec2Instance
from ec2stack.keypair.keypair import GeneratedKeyPair
from ec2stack.provider.provider import create_aws_provider, create_tls_provider
from ec2stack.security_groups.security_groups import PortListSecurityGroup
from ec2stack.vpc.network import VpcNetwork


class Ec2Stack(pulumi.ComponentResource):
    """
    Groups every resource of the stack under one parent so the providers apply to all of them.
    """

    def __init__(self, name: str, settings: StackSettings, opts: pulumi.ResourceOptions = None):
        super().__init__("custom:stack:Ec2Stack", name, {}, opts)

        tags = {**settings.tags, "ManagedBy": "Pulumi"}

        self.aws_provider = create_aws_provider(
            name,
            args={
                "region": settings.region,
                "profile": settings.profile,
            },
            opts=pulumi.ResourceOptions(parent=self),
        )
        self.tls_provider = create_tls_provider(name, opts=pulumi.ResourceOptions(parent=self))

        child_opts = pulumi.ResourceOptions(
            parent=self,
            providers={"aws": self.aws_provider, "tls": self.tls_provider},
        )

        # Key pair first, the instance needs its name
        self.key_pair = GeneratedKeyPair(
            f"{name}-ssh",
            args={
                "key_name": settings.key_name,
                "key_file": settings.key_file,
                "key_format": settings.key_format,
                "write_private_key": settings.write_private_key,
                "tags": tags,
            },
            opts=child_opts,
        )

        self.network = VpcNetwork(
            f"{name}-network",
            args={
                "cidr_block": str(settings.vpc_cidr),
                "subnet_cidr": str(settings.subnet_cidr),
                "availability_zone": settings.availability_zone,
                "enable_dns_hostnames": True,
                "enable_dns_support": True,
                "tags": tags,
            },
            opts=child_opts,
        )

        self.security_group = PortListSecurityGroup(
            f"{name}-sg",
            args={
                "vpc_id": self.network.vpc.id,
                "ports": settings.ingress_ports,
                "tags": tags,
            },
            opts=child_opts,
        )

        self.server = Ec2Instance(
            f"{name}-server",
            args={
                "instance_type": settings.instance_type,
                "ami": settings.ami,
                "ami_name_pattern": settings.ami_name_pattern,
                "ami_owners": settings.ami_owners,
                "key_name": self.key_pair.key_pair.key_name,
                "subnet_id": self.network.public_subnet.id,
                "security_group_ids": [self.security_group.security_group.id],
                "associate_public_ip_address": True,
                "tags": tags,
            },
            opts=child_opts,
        )

        self.outputs = stack_outputs(self)
        self.register_outputs(self.outputs)


def stack_outputs(stack: Ec2Stack) -> dict:
    """Values the program exports, keyed by output name."""
    instance = stack.server.instance
    outputs = {
        "public_ip": instance.public_ip,
        "public_dns": instance.public_dns,
        "instance_id": instance.id,
        "ami_id": stack.server.ami_id,
        "vpc_id": stack.network.vpc.id,
        "subnet_id": stack.network.public_subnet.id,
        "security_group_id": stack.security_group.security_group.id,
        "key_name": stack.key_pair.key_pair.key_name,
    }

    key_file = stack.key_pair.key_file
    if key_file is not None:
        outputs["private_key_file"] = key_file
        outputs["ssh_command"] = pulumi.Output.concat(
            "ssh -i ", key_file.apply(lambda path: path or "<key file>"), " ec2-user@", instance.public_dns,
        )
    else:
        outputs["ssh_command"] = pulumi.Output.concat(
            "ssh -i <key file> ec2-user@", instance.public_dns,
        )

    return outputs


def export_outputs(stack: Ec2Stack) -> None:
    for name, value in stack.outputs.items():
        pulumi.export(name, value)
