"""
Pulumi program to deploy a single web server:
- VPC with one public subnet, internet gateway and route table
- Security group allowing SSH, HTTP and HTTPS
- Locally generated SSH key pair
- EC2 instance using the newest Amazon Linux 2 AMI
"""
import pulumi

from ec2stack.config import load_settings
from ec2stack.stack import Ec2Stack, export_outputs

# Get Pulumi configuration
config = pulumi.Config()
settings = load_settings(
    config,
    defaults={
        "ingress_ports": [22, 80, 443],
        "ami": None,
    },
)

stack = Ec2Stack(pulumi.get_stack(), settings)

# Export outputs (public_ip, public_dns, ssh_command, ...)
export_outputs(stack)
