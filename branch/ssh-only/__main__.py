"""
Pulumi program to deploy a single SSH-only instance from a pinned AMI.
"""
import pulumi

from ec2stack.config import load_settings
from ec2stack.stack import Ec2Stack, export_outputs

PINNED_AMI = "ami-0fa49cc9dc8d62c84"

config = pulumi.Config()
settings = load_settings(
    config,
    defaults={
        "ingress_ports": [22],
        "ami": PINNED_AMI,
    },
)

stack = Ec2Stack(pulumi.get_stack(), settings)

export_outputs(stack)
